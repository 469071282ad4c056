"""
pwaudio_lib/enumerator.py

Registry enumerator: decides which announced globals matter, binds them,
attaches the matching listener and grows the barrier.

For every relevant global, all of the following happen before the callback
returns (and therefore before the daemon's answer can be dispatched):
    bind -> register listener -> request barrier -> track token -> keep subscription
The bind is sent before the barrier request, so the object's initial events
are delivered before that barrier's done event.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .const import (
    KEY_MEDIA_CLASS,
    KEY_METADATA_NAME,
    SETTINGS_METADATA_NAME,
    TYPE_METADATA,
    TYPE_NODE,
)
from .context import RoundtripContext, Subscription
from .events import GlobalAdded, GlobalRemoved
from .listeners import (
    direction_for_media_class,
    make_device_info_listener,
    make_settings_property_listener,
)

logger = logging.getLogger(__name__)

KIND_DEVICE = "device"
KIND_SETTINGS = "settings"


def classify_global(global_obj: GlobalAdded) -> Optional[str]:
    """Return KIND_DEVICE, KIND_SETTINGS or None for globals we ignore."""
    if global_obj.type == TYPE_NODE:
        if direction_for_media_class(global_obj.props.get(KEY_MEDIA_CLASS)) is not None:
            return KIND_DEVICE
        return None
    if global_obj.type == TYPE_METADATA:
        if global_obj.props.get(KEY_METADATA_NAME) == SETTINGS_METADATA_NAME:
            return KIND_SETTINGS
    return None


def _subscribe(ctx: RoundtripContext, global_obj: GlobalAdded, kind: str) -> Subscription:
    handle = ctx.registry.bind(global_obj)
    if kind == KIND_DEVICE:
        listener = handle.subscribe_info(make_device_info_listener(ctx))
    else:
        listener = handle.subscribe_property(make_settings_property_listener(ctx))
        ctx.settings_global_id = global_obj.id
    token = ctx.track_barrier()

    previous = ctx.subscriptions.pop(global_obj.id, None)
    if previous is not None:
        logger.warning("Global id=%s announced twice; replacing its subscription", global_obj.id)
        previous.release()
    subscription = Subscription(global_id=global_obj.id, kind=kind, handle=handle, listener=listener)
    ctx.subscriptions[global_obj.id] = subscription
    logger.debug("Subscribed to %s global id=%s (barrier token=%r)", kind, global_obj.id, token)
    return subscription


def make_registry_enumerator(ctx: RoundtripContext) -> Callable[[GlobalAdded], None]:
    """
    Handler for registry global announcements. Bind and barrier failures
    propagate and abort the roundtrip.
    """

    def handler_registry_global(global_obj: GlobalAdded) -> None:
        kind = classify_global(global_obj)
        if kind is None:
            return
        _subscribe(ctx, global_obj, kind)

    return handler_registry_global


def make_global_remove_handler(ctx: RoundtripContext) -> Callable[[GlobalRemoved], None]:
    """
    Handler for registry global removals: drop the subscription, if any.

    Entities already in the store are kept, and a barrier token issued for
    the object still completes normally.
    """

    def handler_registry_global_remove(evt: GlobalRemoved) -> None:
        subscription = ctx.subscriptions.pop(evt.id, None)
        if subscription is None:
            return
        subscription.release()
        if ctx.settings_global_id == evt.id:
            ctx.settings_global_id = None
        logger.debug("Dropped subscription for removed %s global id=%s", subscription.kind, evt.id)

    return handler_registry_global_remove
