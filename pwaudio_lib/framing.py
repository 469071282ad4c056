"""
pwaudio_lib/framing.py

Native protocol message framing.

Wire layout (little-endian):
    [u32 object_id][u32 opcode<<24 | payload_size][u32 seq][u32 n_fds][payload ...]

The payload is one Struct POD, optionally followed by a footer POD which we
ignore. There is no checksum, so deframing never needs to resync: the stream
is either well-formed or the session is dead.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .const import HEADER_SIZE, MAX_PAYLOAD_SIZE

_HEADER = struct.Struct("<IIII")


@dataclass(frozen=True, slots=True)
class Frame:
    obj_id: int
    opcode: int
    seq: int
    n_fds: int
    payload: bytes


@dataclass(slots=True)
class DeframeState:
    buffer: bytearray = field(default_factory=bytearray)


def frame_build(*, obj_id: int, opcode: int, seq: int, payload: bytes, n_fds: int = 0) -> bytes:
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(f"payload too large for a native frame ({len(payload)} bytes)")
    if not 0 <= opcode <= 0xFF:
        raise ValueError(f"opcode must fit in 8 bits (got {opcode!r})")
    header = _HEADER.pack(obj_id, (opcode << 24) | len(payload), seq & 0xFFFFFFFF, n_fds)
    return header + payload


def deframe_feed(state: DeframeState, chunk: bytes) -> list[Frame]:
    """
    Append chunk to the reassembly buffer and return every complete frame.

    Partial frames stay buffered until a later call completes them.
    """
    state.buffer.extend(chunk)
    frames: list[Frame] = []
    while len(state.buffer) >= HEADER_SIZE:
        obj_id, op_size, seq, n_fds = _HEADER.unpack_from(state.buffer, 0)
        size = op_size & MAX_PAYLOAD_SIZE
        if len(state.buffer) < HEADER_SIZE + size:
            break
        payload = bytes(state.buffer[HEADER_SIZE : HEADER_SIZE + size])
        del state.buffer[: HEADER_SIZE + size]
        frames.append(Frame(obj_id=obj_id, opcode=op_size >> 24, seq=seq, n_fds=n_fds, payload=payload))
    return frames
