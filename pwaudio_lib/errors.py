"""
pwaudio_lib/errors.py

Exception hierarchy.

Only the fatal class surfaces to callers: connection, protocol, remote and
bind failures abort the whole roundtrip. Recoverable conditions (defaulted
device fields, discarded settings updates, stale completions) never raise.
"""

from __future__ import annotations

from typing import Optional


class PwAudioError(Exception):
    """Base class for all library errors."""


class PwConnectionError(PwAudioError):
    """Connecting to (or talking to) the daemon socket failed."""


class PwConfigError(PwAudioError):
    """Configuration is invalid or incomplete."""


class PwNotConnectedError(PwAudioError):
    """Operation requires a connected session."""


class PwProtocolError(PwAudioError):
    """Malformed frame or payload received from the daemon."""


class PodDecodeError(PwProtocolError):
    """A POD value could not be decoded."""


class PwBindError(PwAudioError):
    """Binding a discovered global failed."""


class PwRemoteError(PwAudioError):
    """The daemon reported an error on one of our objects."""

    def __init__(self, *, id: int, seq: int, res: int, message: Optional[str]) -> None:
        self.id = id
        self.seq = seq
        self.res = res
        self.message = message
        super().__init__(f"remote error on object {id} (seq={seq}, res={res}): {message}")


__all__ = [
    "PodDecodeError",
    "PwAudioError",
    "PwBindError",
    "PwConfigError",
    "PwConnectionError",
    "PwNotConnectedError",
    "PwProtocolError",
    "PwRemoteError",
]
