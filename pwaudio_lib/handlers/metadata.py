"""
pwaudio_lib/handlers/metadata.py

Decoders for Metadata interface events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from pwaudio_lib.const import TYPE_METADATA, MetadataEvent
from pwaudio_lib.events import MetadataProperty, UNSET_OBJ_ID, UNSET_SEQ
from pwaudio_lib.handlers.common import int_arg, require_args, str_arg

if TYPE_CHECKING:
    from pwaudio_lib.dispatcher import Dispatcher


def decode_metadata_property(args: Sequence[Any]) -> MetadataProperty:
    """
    metadata.property: Struct(Int subject, String key, String type, String value)
    """
    what = "metadata.property"
    require_args(args, 4, what=what)
    return MetadataProperty(
        kind=MetadataProperty.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        subject=int_arg(args, 0, what=what),
        key=str_arg(args, 1, what=what),
        type=str_arg(args, 2, what=what),
        value=str_arg(args, 3, what=what),
    )


def register(dispatcher: Dispatcher) -> None:
    dispatcher.register_handler((TYPE_METADATA, MetadataEvent.PROPERTY), decode_metadata_property)
