"""
pwaudio_lib/handlers/core.py

Decoders for Core interface events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from pwaudio_lib.const import TYPE_CORE, CoreEvent
from pwaudio_lib.events import (
    CoreBoundId,
    CoreBoundProps,
    CoreDone,
    CoreError,
    CoreInfo,
    CorePing,
    CoreRemoveId,
    UNSET_OBJ_ID,
    UNSET_SEQ,
)
from pwaudio_lib.handlers.common import int_arg, props_arg, require_args, str_arg

if TYPE_CHECKING:
    from pwaudio_lib.dispatcher import Dispatcher


def decode_core_info(args: Sequence[Any]) -> CoreInfo:
    what = "core.info"
    require_args(args, 8, what=what)
    return CoreInfo(
        kind=CoreInfo.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        cookie=int_arg(args, 1, what=what),
        user_name=str_arg(args, 2, what=what),
        host_name=str_arg(args, 3, what=what),
        version=str_arg(args, 4, what=what),
        name=str_arg(args, 5, what=what),
        change_mask=int_arg(args, 6, what=what),
        props=props_arg(args, 7, what=what),
    )


def decode_core_done(args: Sequence[Any]) -> CoreDone:
    what = "core.done"
    require_args(args, 2, what=what)
    return CoreDone(
        kind=CoreDone.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        token=int_arg(args, 1, what=what),
    )


def decode_core_ping(args: Sequence[Any]) -> CorePing:
    what = "core.ping"
    require_args(args, 2, what=what)
    return CorePing(
        kind=CorePing.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        ping_seq=int_arg(args, 1, what=what),
    )


def decode_core_error(args: Sequence[Any]) -> CoreError:
    what = "core.error"
    require_args(args, 4, what=what)
    return CoreError(
        kind=CoreError.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        error_seq=int_arg(args, 1, what=what),
        res=int_arg(args, 2, what=what),
        message=str_arg(args, 3, what=what),
    )


def decode_core_remove_id(args: Sequence[Any]) -> CoreRemoveId:
    what = "core.remove_id"
    require_args(args, 1, what=what)
    return CoreRemoveId(kind=CoreRemoveId.KIND, obj_id=UNSET_OBJ_ID, seq=UNSET_SEQ, id=int_arg(args, 0, what=what))


def decode_core_bound_id(args: Sequence[Any]) -> CoreBoundId:
    what = "core.bound_id"
    require_args(args, 2, what=what)
    return CoreBoundId(
        kind=CoreBoundId.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        global_id=int_arg(args, 1, what=what),
    )


def decode_core_bound_props(args: Sequence[Any]) -> CoreBoundProps:
    what = "core.bound_props"
    require_args(args, 3, what=what)
    return CoreBoundProps(
        kind=CoreBoundProps.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        global_id=int_arg(args, 1, what=what),
        props=props_arg(args, 2, what=what),
    )


def register(dispatcher: Dispatcher) -> None:
    dispatcher.register_handler((TYPE_CORE, CoreEvent.INFO), decode_core_info)
    dispatcher.register_handler((TYPE_CORE, CoreEvent.DONE), decode_core_done)
    dispatcher.register_handler((TYPE_CORE, CoreEvent.PING), decode_core_ping)
    dispatcher.register_handler((TYPE_CORE, CoreEvent.ERROR), decode_core_error)
    dispatcher.register_handler((TYPE_CORE, CoreEvent.REMOVE_ID), decode_core_remove_id)
    dispatcher.register_handler((TYPE_CORE, CoreEvent.BOUND_ID), decode_core_bound_id)
    dispatcher.register_handler((TYPE_CORE, CoreEvent.BOUND_PROPS), decode_core_bound_props)
