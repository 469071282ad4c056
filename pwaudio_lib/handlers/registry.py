"""
pwaudio_lib/handlers/registry.py

Decoders for Registry interface events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from pwaudio_lib.const import TYPE_REGISTRY, RegistryEvent
from pwaudio_lib.errors import PodDecodeError
from pwaudio_lib.events import GlobalAdded, GlobalRemoved, UNSET_OBJ_ID, UNSET_SEQ
from pwaudio_lib.handlers.common import int_arg, props_arg, require_args, str_arg

if TYPE_CHECKING:
    from pwaudio_lib.dispatcher import Dispatcher


def decode_registry_global(args: Sequence[Any]) -> GlobalAdded:
    """
    registry.global: Struct(Int id, Int permissions, String type, Int version, Struct props)
    """
    what = "registry.global"
    require_args(args, 5, what=what)
    type_ = str_arg(args, 2, what=what)
    if type_ is None:
        raise PodDecodeError(f"{what}: missing object type")
    return GlobalAdded(
        kind=GlobalAdded.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        permissions=int_arg(args, 1, what=what),
        type=type_,
        version=int_arg(args, 3, what=what),
        props=props_arg(args, 4, what=what),
    )


def decode_registry_global_remove(args: Sequence[Any]) -> GlobalRemoved:
    what = "registry.global_remove"
    require_args(args, 1, what=what)
    return GlobalRemoved(kind=GlobalRemoved.KIND, obj_id=UNSET_OBJ_ID, seq=UNSET_SEQ, id=int_arg(args, 0, what=what))


def register(dispatcher: Dispatcher) -> None:
    dispatcher.register_handler((TYPE_REGISTRY, RegistryEvent.GLOBAL), decode_registry_global)
    dispatcher.register_handler((TYPE_REGISTRY, RegistryEvent.GLOBAL_REMOVE), decode_registry_global_remove)
