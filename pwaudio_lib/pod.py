"""
pwaudio_lib/pod.py

SPA POD codec (subset used by the native protocol).

Layout of every POD:
    [u32 body_size][u32 type][body ...][pad to 8 bytes]

Python mapping:
- None   <-> None
- bool   <-> Bool
- int    <-> Int (32-bit). Use Long/Id/Fd wrappers to encode the other integer kinds.
- float  <-> Double. Use Float to encode 32-bit floats.
- str    <-> String (NUL terminated)
- bytes  <-> Bytes
- list   <-> Struct (tuples are accepted when encoding)

Id, Long and Fd decode to plain ints. Unknown POD types decode to RawPod so a
newer daemon cannot break decoding of the fields we care about.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, Mapping, Optional

from .errors import PodDecodeError

POD_HEADER = struct.Struct("<II")


class PodType(IntEnum):
    NONE = 1
    BOOL = 2
    ID = 3
    INT = 4
    LONG = 5
    FLOAT = 6
    DOUBLE = 7
    STRING = 8
    BYTES = 9
    RECTANGLE = 10
    FRACTION = 11
    BITMAP = 12
    ARRAY = 13
    STRUCT = 14
    OBJECT = 15
    SEQUENCE = 16
    POINTER = 17
    FD = 18
    CHOICE = 19
    POD = 20


@dataclass(frozen=True, slots=True)
class Id:
    value: int


@dataclass(frozen=True, slots=True)
class Long:
    value: int


@dataclass(frozen=True, slots=True)
class Fd:
    value: int


@dataclass(frozen=True, slots=True)
class Float:
    value: float


@dataclass(frozen=True, slots=True)
class RawPod:
    type: int
    body: bytes


def _pad8(size: int) -> int:
    return (size + 7) & ~7


def _pod(pod_type: int, body: bytes) -> bytes:
    return POD_HEADER.pack(len(body), pod_type) + body + b"\x00" * (_pad8(len(body)) - len(body))


# --------------------------
# Encoding
# --------------------------

def encode(value: Any) -> bytes:
    """Encode a Python value as a single POD."""
    if value is None:
        return _pod(PodType.NONE, b"")
    if isinstance(value, bool):
        return _pod(PodType.BOOL, struct.pack("<i", 1 if value else 0))
    if isinstance(value, Id):
        return _pod(PodType.ID, struct.pack("<I", value.value & 0xFFFFFFFF))
    if isinstance(value, Long):
        return _pod(PodType.LONG, struct.pack("<q", value.value))
    if isinstance(value, Fd):
        return _pod(PodType.FD, struct.pack("<q", value.value))
    if isinstance(value, Float):
        return _pod(PodType.FLOAT, struct.pack("<f", value.value))
    if isinstance(value, int):
        if not -(2**31) <= value <= 0xFFFFFFFF:
            raise ValueError(f"int out of range for an Int POD (got {value!r})")
        if value > 0x7FFFFFFF:
            value -= 2**32
        return _pod(PodType.INT, struct.pack("<i", value))
    if isinstance(value, float):
        return _pod(PodType.DOUBLE, struct.pack("<d", value))
    if isinstance(value, str):
        return _pod(PodType.STRING, value.encode("utf-8") + b"\x00")
    if isinstance(value, (bytes, bytearray)):
        return _pod(PodType.BYTES, bytes(value))
    if isinstance(value, RawPod):
        return _pod(value.type, value.body)
    if isinstance(value, (list, tuple)):
        return encode_struct(value)
    raise TypeError(f"cannot encode {type(value).__name__} as a POD")


def encode_struct(values: Iterable[Any]) -> bytes:
    return _pod(PodType.STRUCT, b"".join(encode(v) for v in values))


def dict_struct(props: Optional[Mapping[str, Optional[str]]]) -> list[Any]:
    """
    Build the struct layout PipeWire uses for spa_dict:
        Struct( Int n_items, (String key, String value) * n_items )
    """
    items = list((props or {}).items())
    out: list[Any] = [len(items)]
    for key, value in items:
        out.append(str(key))
        out.append(None if value is None else str(value))
    return out


# --------------------------
# Decoding
# --------------------------

def decode(buf: bytes, offset: int = 0) -> tuple[Any, int]:
    """
    Decode one POD starting at offset.

    Returns (value, offset_after_padding).
    """
    if len(buf) - offset < POD_HEADER.size:
        raise PodDecodeError(f"truncated POD header at offset {offset}")
    size, pod_type = POD_HEADER.unpack_from(buf, offset)
    start = offset + POD_HEADER.size
    end = start + size
    if end > len(buf):
        raise PodDecodeError(f"POD body overruns buffer (size={size}, available={len(buf) - start})")
    body = bytes(buf[start:end])
    value = _decode_body(pod_type, body)
    return value, min(start + _pad8(size), len(buf))


def decode_struct(buf: bytes, offset: int = 0) -> list[Any]:
    """Decode a POD that must be a Struct; trailing bytes (e.g. footers) are ignored."""
    value, _ = decode(buf, offset)
    if not isinstance(value, list):
        raise PodDecodeError(f"expected a Struct POD, got {type(value).__name__}")
    return value


def _decode_body(pod_type: int, body: bytes) -> Any:
    try:
        if pod_type == PodType.NONE:
            return None
        if pod_type == PodType.BOOL:
            return struct.unpack_from("<i", body)[0] != 0
        if pod_type == PodType.ID:
            return struct.unpack_from("<I", body)[0]
        if pod_type == PodType.INT:
            return struct.unpack_from("<i", body)[0]
        if pod_type in (PodType.LONG, PodType.FD):
            return struct.unpack_from("<q", body)[0]
        if pod_type == PodType.FLOAT:
            return struct.unpack_from("<f", body)[0]
        if pod_type == PodType.DOUBLE:
            return struct.unpack_from("<d", body)[0]
    except struct.error as e:
        raise PodDecodeError(f"short body for POD type {pod_type}: {e}") from e

    if pod_type == PodType.STRING:
        if not body or body[-1] != 0:
            raise PodDecodeError("String POD is not NUL terminated")
        return body[: body.index(b"\x00")].decode("utf-8", errors="replace")
    if pod_type == PodType.BYTES:
        return body
    if pod_type == PodType.STRUCT:
        items: list[Any] = []
        pos = 0
        while pos < len(body):
            item, pos = decode(body, pos)
            items.append(item)
        return items
    return RawPod(type=pod_type, body=body)


def struct_to_dict(value: Any) -> dict[str, Optional[str]]:
    """
    Inverse of dict_struct(). Accepts the decoded list form.

    Insertion order follows the wire order. A malformed dict raises PodDecodeError.
    """
    if value is None:
        return {}
    if not isinstance(value, list) or not value or not isinstance(value[0], int):
        raise PodDecodeError("dict struct must start with an Int item count")
    n_items = value[0]
    if n_items < 0 or len(value) < 1 + 2 * n_items:
        raise PodDecodeError(f"dict struct announces {n_items} items but carries {(len(value) - 1) // 2}")
    out: dict[str, Optional[str]] = {}
    for i in range(n_items):
        key = value[1 + 2 * i]
        val = value[2 + 2 * i]
        if not isinstance(key, str):
            raise PodDecodeError(f"dict key {i} is not a String")
        out[key] = val if val is None or isinstance(val, str) else str(val)
    return out


__all__ = [
    "Fd",
    "Float",
    "Id",
    "Long",
    "PodType",
    "RawPod",
    "decode",
    "decode_struct",
    "dict_struct",
    "encode",
    "encode_struct",
    "struct_to_dict",
]
