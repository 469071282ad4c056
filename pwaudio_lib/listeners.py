"""
pwaudio_lib/listeners.py

Per-object listeners: turn node info and settings metadata events into
resolved entities in the object store.

Error policy:
- Device info: a missing or unparsable field falls back to its default; the
  device is still recorded.
- Settings: a malformed value discards that whole event; the field keeps its
  previous value.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Mapping, Optional

from .const import (
    DEFAULT_BUFFER_LIMIT,
    DEFAULT_CHANNELS,
    KEY_AUDIO_CHANNELS,
    KEY_MEDIA_CLASS,
    KEY_NODE_DESCRIPTION,
    KEY_NODE_NAME,
    KEY_NODE_NICK,
    KEY_QUANTUM_LIMIT,
    MEDIA_CLASS_SINK,
    MEDIA_CLASS_SOURCE,
    UNKNOWN,
)
from .context import RoundtripContext
from .events import MetadataProperty, NodeInfo
from .states import Device, Direction

logger = logging.getLogger(__name__)

KEY_CLOCK_ALLOWED_RATES = "clock.allowed-rates"

# Scalar settings keys -> Settings field.
SETTINGS_INT_FIELDS: dict[str, str] = {
    "clock.rate": "rate",
    "clock.quantum": "quantum",
    "clock.min-quantum": "min_quantum",
    "clock.max-quantum": "max_quantum",
    "clock.force-rate": "force_rate",
    "clock.force-quantum": "force_quantum",
}

# Settings live on the core object.
SETTINGS_SUBJECT = 0

U32_MAX = 0xFFFFFFFF

_UNSIGNED_RE = re.compile(r"\d+", re.ASCII)
_LIST_SEP_RE = re.compile(r"[\s,]+")


def direction_for_media_class(media_class: Optional[str]) -> Optional[Direction]:
    if media_class == MEDIA_CLASS_SINK:
        return Direction.INPUT
    if media_class == MEDIA_CLASS_SOURCE:
        return Direction.OUTPUT
    return None


def parse_unsigned(value: Optional[str], max_value: Optional[int] = None) -> Optional[int]:
    """Parse a decimal unsigned integer; None if malformed or above max_value."""
    if value is None:
        return None
    value = value.strip()
    if not _UNSIGNED_RE.fullmatch(value):
        return None
    number = int(value)
    if max_value is not None and number > max_value:
        return None
    return number


def parse_allowed_rates(value: Optional[str]) -> Optional[list[int]]:
    """
    Parse "[ 44100 48000 ]" into [44100, 48000].

    Returns None if the brackets are missing or any element is not an
    unsigned integer; a partial list is never returned.
    """
    if value is None:
        return None
    value = value.strip()
    if len(value) < 2 or value[0] != "[" or value[-1] != "]":
        return None
    rates: list[int] = []
    for item in _LIST_SEP_RE.split(value[1:-1]):
        if not item:
            continue
        rate = parse_unsigned(item, U32_MAX)
        if rate is None:
            return None
        rates.append(rate)
    return rates


def device_from_props(obj_id: int, props: Mapping[str, Optional[str]]) -> Optional[Device]:
    """Build a Device from node properties; None if it is not an audio sink/source."""
    direction = direction_for_media_class(props.get(KEY_MEDIA_CLASS))
    if direction is None:
        return None

    channels = parse_unsigned(props.get(KEY_AUDIO_CHANNELS), U32_MAX)
    buffer_limit = parse_unsigned(props.get(KEY_QUANTUM_LIMIT), U32_MAX)
    return Device(
        id=obj_id,
        node_name=props.get(KEY_NODE_NAME) or UNKNOWN,
        nick_name=props.get(KEY_NODE_NICK) or UNKNOWN,
        description=props.get(KEY_NODE_DESCRIPTION) or UNKNOWN,
        direction=direction,
        channels=DEFAULT_CHANNELS if channels is None else channels,
        buffer_limit=DEFAULT_BUFFER_LIMIT if buffer_limit is None else buffer_limit,
    )


def make_device_info_listener(ctx: RoundtripContext) -> Callable[[NodeInfo], None]:
    """
    Listener for node info events. Every firing appends one Device.
    """

    def handler_node_info(info: NodeInfo) -> None:
        if info.props is None:
            logger.debug("Node id=%s info carried no properties", info.id)
            return
        device = device_from_props(info.id, info.props)
        if device is None:
            logger.debug("Node id=%s is not an audio sink/source; skipping", info.id)
            return
        ctx.store.add_device(device)

    return handler_node_info


def make_settings_property_listener(ctx: RoundtripContext) -> Callable[[MetadataProperty], None]:
    """
    Listener for the "settings" metadata object. One key per event.
    """

    def handler_settings_property(prop: MetadataProperty) -> None:
        if prop.subject != SETTINGS_SUBJECT or prop.key is None:
            return
        settings = ctx.store.settings

        if prop.key == KEY_CLOCK_ALLOWED_RATES:
            rates = parse_allowed_rates(prop.value)
            if rates is None:
                logger.debug("Discarding malformed %s=%r", prop.key, prop.value)
                return
            settings.allow_rates = rates
            return

        field_name = SETTINGS_INT_FIELDS.get(prop.key)
        if field_name is None:
            return
        number = parse_unsigned(prop.value, U32_MAX)
        if number is None:
            logger.debug("Discarding malformed %s=%r", prop.key, prop.value)
            return
        setattr(settings, field_name, number)

    return handler_settings_property
