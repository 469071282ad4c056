"""
pwaudio_lib/handlers/node.py

Decoders for Node interface events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from pwaudio_lib.const import TYPE_NODE, NodeEvent
from pwaudio_lib.events import NodeInfo, UNSET_OBJ_ID, UNSET_SEQ
from pwaudio_lib.handlers.common import int_arg, props_arg, require_args, str_arg

if TYPE_CHECKING:
    from pwaudio_lib.dispatcher import Dispatcher


def decode_node_info(args: Sequence[Any]) -> NodeInfo:
    """
    node.info: Struct(Int id, Int max_input_ports, Int max_output_ports, Long change_mask,
                      Int n_input_ports, Int n_output_ports, Id state, String error,
                      Struct props, Struct params)

    The params struct is not needed and is not decoded.
    """
    what = "node.info"
    require_args(args, 9, what=what)
    return NodeInfo(
        kind=NodeInfo.KIND,
        obj_id=UNSET_OBJ_ID,
        seq=UNSET_SEQ,
        id=int_arg(args, 0, what=what),
        max_input_ports=int_arg(args, 1, what=what),
        max_output_ports=int_arg(args, 2, what=what),
        change_mask=int_arg(args, 3, what=what),
        n_input_ports=int_arg(args, 4, what=what),
        n_output_ports=int_arg(args, 5, what=what),
        state=int_arg(args, 6, what=what),
        error=str_arg(args, 7, what=what),
        props=None if args[8] is None else props_arg(args, 8, what=what),
    )


def register(dispatcher: Dispatcher) -> None:
    dispatcher.register_handler((TYPE_NODE, NodeEvent.INFO), decode_node_info)
