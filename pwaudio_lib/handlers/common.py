"""
pwaudio_lib/handlers/common.py

Shape checks shared by the per-interface decoders.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pwaudio_lib.errors import PodDecodeError
from pwaudio_lib.pod import struct_to_dict


def require_args(args: Sequence[Any], count: int, *, what: str) -> None:
    if len(args) < count:
        raise PodDecodeError(f"{what}: expected {count} arguments, got {len(args)}")


def int_arg(args: Sequence[Any], index: int, *, what: str) -> int:
    value = args[index]
    if isinstance(value, bool) or not isinstance(value, int):
        raise PodDecodeError(f"{what}: argument {index} must be an integer (got {type(value).__name__})")
    return value


def str_arg(args: Sequence[Any], index: int, *, what: str) -> Optional[str]:
    value = args[index]
    if value is not None and not isinstance(value, str):
        raise PodDecodeError(f"{what}: argument {index} must be a string (got {type(value).__name__})")
    return value


def props_arg(args: Sequence[Any], index: int, *, what: str) -> dict[str, Optional[str]]:
    try:
        return struct_to_dict(args[index])
    except PodDecodeError as e:
        raise PodDecodeError(f"{what}: argument {index}: {e}") from e
