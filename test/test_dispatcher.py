from __future__ import annotations

import inspect

import pytest

from pwaudio_lib import pod
from pwaudio_lib.const import TYPE_NODE, TYPE_REGISTRY, NodeEvent, RegistryEvent
from pwaudio_lib.dispatcher import Dispatcher
from pwaudio_lib.errors import PodDecodeError
from pwaudio_lib.events import GlobalAdded
from pwaudio_lib.framing import Frame
from pwaudio_lib.handlers import core, metadata, node, registry
from pwaudio_lib.handlers.registry import decode_registry_global


class _SpyTarget:
    def __init__(self, interface: str) -> None:
        self.interface = interface
        self.events = []

    def emit(self, evt) -> None:
        self.events.append(evt)


def _dispatcher() -> Dispatcher:
    d = Dispatcher()
    for module in (core, registry, node, metadata):
        module.register(d)
    return d


def _frame(obj_id: int, opcode: int, args, seq: int = 0) -> Frame:
    return Frame(obj_id=obj_id, opcode=int(opcode), seq=seq, n_fds=0, payload=pod.encode_struct(args))


def test_dispatch_stamps_header_fields() -> None:
    d = _dispatcher()
    target = _SpyTarget(TYPE_REGISTRY)
    d.add_object(2, target)

    args = [30, 0x1FF, TYPE_NODE, 3, pod.dict_struct({"media.class": "Audio/Sink"})]
    evt = d.dispatch(_frame(2, RegistryEvent.GLOBAL, args, seq=17))

    assert isinstance(evt, GlobalAdded)
    assert (evt.obj_id, evt.seq) == (2, 17)
    assert evt.props == {"media.class": "Audio/Sink"}
    assert target.events == [evt]


def test_unknown_object_and_unknown_route_are_dropped() -> None:
    d = _dispatcher()
    target = _SpyTarget(TYPE_NODE)
    d.add_object(3, target)

    assert d.dispatch(_frame(9, NodeEvent.INFO, [])) is None
    assert d.dispatch(_frame(3, NodeEvent.PARAM, [])) is None
    assert target.events == []


def test_registration_conflicts_raise() -> None:
    d = _dispatcher()
    with pytest.raises(ValueError):
        node.register(d)

    first = _SpyTarget(TYPE_NODE)
    d.add_object(3, first)
    d.add_object(3, first)
    with pytest.raises(ValueError):
        d.add_object(3, _SpyTarget(TYPE_NODE))


def test_malformed_event_raises_decode_error() -> None:
    d = _dispatcher()
    target = _SpyTarget(TYPE_REGISTRY)
    d.add_object(2, target)

    with pytest.raises(PodDecodeError):
        d.dispatch(_frame(2, RegistryEvent.GLOBAL, [30, 0x1FF]))
    with pytest.raises(PodDecodeError):
        decode_registry_global([30, 0x1FF, None, 3, pod.dict_struct({})])
    with pytest.raises(PodDecodeError):
        decode_registry_global(["30", 0x1FF, TYPE_NODE, 3, pod.dict_struct({})])


def test_register_functions_take_a_dispatcher() -> None:
    for module in (core, registry, node, metadata):
        params = inspect.signature(module.register).parameters
        assert params["dispatcher"].annotation == "Dispatcher"
