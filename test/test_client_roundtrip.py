from __future__ import annotations

import gc
import logging
from collections import deque
from typing import Any, Optional, Sequence

import pytest

from pwaudio_lib import pod
from pwaudio_lib.client import PipeWireClient
from pwaudio_lib.const import (
    TYPE_METADATA,
    TYPE_NODE,
    CoreEvent,
    CoreMethod,
    MetadataEvent,
    NodeEvent,
    RegistryEvent,
    RegistryMethod,
)
from pwaudio_lib.errors import PwRemoteError
from pwaudio_lib.framing import Frame
from pwaudio_lib.proxy import NodeProxy
from pwaudio_lib.roundtrip import roundtrip
from pwaudio_lib.states import Direction


def _frame(obj_id: int, opcode: int, args: Sequence[Any], seq: int = 0) -> Frame:
    return Frame(obj_id=obj_id, opcode=int(opcode), seq=seq, n_fds=0, payload=pod.encode_struct(args))


def _node_info_args(node_id: int, props: dict[str, str]) -> list[Any]:
    return [node_id, 0, 0, pod.Long(0x1FF), 0, 0, pod.Id(2), None, pod.dict_struct(props), []]


class _FakeDaemonSession:
    """
    Answers method calls the way the daemon does: replies are queued in
    the order the calls were made and delivered one per pump_once().
    """

    def __init__(
        self,
        globals_: Sequence[tuple[int, str, dict[str, str]]] = (),
        node_props: Optional[dict[int, dict[str, str]]] = None,
        metadata_props: Optional[dict[int, list[tuple[str, str]]]] = None,
    ) -> None:
        self.globals = list(globals_)
        self.node_props = node_props or {}
        self.metadata_props = metadata_props or {}
        self.sent: list[tuple[int, int, list[Any]]] = []
        self.inbound: deque[Frame] = deque()
        self.on_message = None
        self.connected = False
        self.closed = False
        self._seq = 0
        self._registry_id: Optional[int] = None

    @property
    def next_seq(self) -> int:
        return self._seq

    def connect(self) -> None:
        self.connected = True

    def close(self) -> None:
        self.closed = True

    def send_message(self, obj_id: int, opcode: int, args: Sequence[Any]) -> int:
        seq = self._seq
        self._seq += 1
        # Round-trip through the codec so the test sees what the wire would carry.
        decoded = pod.decode_struct(pod.encode_struct(args))
        self.sent.append((obj_id, int(opcode), decoded))
        self._react(obj_id, int(opcode), decoded)
        return seq

    def _react(self, obj_id: int, opcode: int, args: list[Any]) -> None:
        if obj_id == 0 and opcode == CoreMethod.GET_REGISTRY:
            self._registry_id = args[1]
            for gid, type_, props in self.globals:
                self.inbound.append(
                    _frame(self._registry_id, RegistryEvent.GLOBAL, [gid, 0x1FF, type_, 3, pod.dict_struct(props)])
                )
        elif obj_id == 0 and opcode == CoreMethod.SYNC:
            self.inbound.append(_frame(0, CoreEvent.DONE, [args[0], args[1]]))
        elif obj_id == self._registry_id and opcode == RegistryMethod.BIND:
            gid, type_, _version, new_id = args
            if type_ == TYPE_NODE:
                self.inbound.append(_frame(new_id, NodeEvent.INFO, _node_info_args(gid, self.node_props[gid])))
            elif type_ == TYPE_METADATA:
                for key, value in self.metadata_props.get(gid, []):
                    self.inbound.append(_frame(new_id, MetadataEvent.PROPERTY, [0, key, "", value]))

    def pump_once(self) -> Optional[Frame]:
        if not self.inbound:
            raise AssertionError("pump_once() called with nothing left to deliver")
        frame = self.inbound.popleft()
        self.on_message(frame)
        return frame


def test_roundtrip_against_fake_daemon() -> None:
    session = _FakeDaemonSession(
        globals_=[
            (30, TYPE_NODE, {"media.class": "Audio/Sink"}),
            (31, TYPE_NODE, {"media.class": "Audio/Source"}),
            (32, TYPE_NODE, {"media.class": "Video/Source"}),
            (33, TYPE_METADATA, {"metadata.name": "settings"}),
        ],
        node_props={
            30: {"media.class": "Audio/Sink", "node.name": "alsa_output.foo", "audio.channels": "2"},
            31: {"media.class": "Audio/Source", "node.name": "alsa_input.bar", "audio.channels": "1"},
        },
        metadata_props={33: [("clock.rate", "48000"), ("clock.allowed-rates", "[ 44100 48000 ]")]},
    )
    client = PipeWireClient(session=session)

    store = roundtrip(client)

    assert session.connected
    assert not session.inbound
    assert [(d.id, d.node_name, d.direction) for d in store.devices] == [
        (30, "alsa_output.foo", Direction.INPUT),
        (31, "alsa_input.bar", Direction.OUTPUT),
    ]
    assert store.settings.rate == 48000
    assert store.settings.allow_rates == [44100, 48000]

    opcodes = [(obj_id, opcode) for obj_id, opcode, _ in session.sent]
    assert opcodes[:2] == [(0, CoreMethod.GET_REGISTRY), (0, CoreMethod.SYNC)]
    binds = [args for obj_id, opcode, args in session.sent if opcode == RegistryMethod.BIND and obj_id == 2]
    assert [(b[0], b[3]) for b in binds] == [(30, 3), (31, 4), (33, 5)]


def test_barrier_tokens_carry_async_bit_and_seq() -> None:
    session = _FakeDaemonSession()
    client = PipeWireClient(session=session)
    session.send_message(0, CoreMethod.HELLO, [3])

    token = client.request_barrier()

    assert token == 0x40000001
    assert session.sent[-1] == (0, CoreMethod.SYNC, [0, 0x40000001])


def test_ping_is_answered_with_pong() -> None:
    session = _FakeDaemonSession()
    PipeWireClient(session=session)
    session.inbound.append(_frame(0, CoreEvent.PING, [0, 77]))

    session.pump_once()

    assert session.sent == [(0, CoreMethod.PONG, [0, 77])]


def test_core_error_raises_remote_error() -> None:
    session = _FakeDaemonSession()
    client = PipeWireClient(session=session)
    session.inbound.append(_frame(0, CoreEvent.ERROR, [5, 12, -2, "no such object"]))

    with pytest.raises(PwRemoteError) as excinfo:
        client.run()

    assert excinfo.value.id == 5
    assert excinfo.value.res == -2
    assert not client.running


def test_dropped_proxy_stops_receiving_events() -> None:
    session = _FakeDaemonSession()
    client = PipeWireClient(session=session)
    seen: list[Any] = []

    node = client.create_proxy(NodeProxy)
    node.subscribe_info(seen.append)
    info = _frame(node.id, NodeEvent.INFO, _node_info_args(30, {"media.class": "Audio/Sink"}))

    session.inbound.append(info)
    session.pump_once()
    assert len(seen) == 1
    assert seen[0].obj_id == node.id

    node_id = node.id
    del node
    gc.collect()
    assert client.dispatcher.get_object(node_id) is None

    session.inbound.append(info)
    session.pump_once()
    assert len(seen) == 1


def test_remove_id_releases_object() -> None:
    session = _FakeDaemonSession()
    client = PipeWireClient(session=session)
    node = client.create_proxy(NodeProxy)
    session.inbound.append(_frame(0, CoreEvent.REMOVE_ID, [node.id]))

    session.pump_once()

    assert client.dispatcher.get_object(node.id) is None


def test_proxy_ids_are_sequential() -> None:
    client = PipeWireClient(session=_FakeDaemonSession())
    registry = client.get_registry()
    node = client.create_proxy(NodeProxy)
    assert (registry.id, node.id) == (2, 3)


def test_core_info_is_logged(caplog) -> None:
    caplog.set_level(logging.INFO, logger="pwaudio_lib.client")
    session = _FakeDaemonSession()
    PipeWireClient(session=session)
    info = [0, 0x1234, "alice", "host", "1.2.0", "pipewire-0", pod.Long(0xF), pod.dict_struct({"core.name": "pipewire-0"})]
    session.inbound.append(_frame(0, CoreEvent.INFO, info))

    session.pump_once()

    assert "Connected to pipewire-0 (version 1.2.0, user alice)" in caplog.text


def test_registry_remove_listener_can_be_detached() -> None:
    session = _FakeDaemonSession()
    client = PipeWireClient(session=session)
    registry = client.get_registry()
    added: list[Any] = []
    removed: list[Any] = []
    added_listener = registry.enumerate_globals(added.append)
    removed_listener = registry.subscribe_global_remove(removed.append)

    session.inbound.append(_frame(registry.id, RegistryEvent.GLOBAL_REMOVE, [30]))
    session.pump_once()
    assert [evt.id for evt in removed] == [30]

    removed_listener.remove()
    added_listener.remove()
    session.inbound.append(_frame(registry.id, RegistryEvent.GLOBAL_REMOVE, [31]))
    session.inbound.append(_frame(registry.id, RegistryEvent.GLOBAL, [32, 0x1FF, TYPE_NODE, 3, pod.dict_struct({})]))
    session.pump_once()
    session.pump_once()
    assert [evt.id for evt in removed] == [30]
    assert added == []
