"""Public API for pwaudio_lib."""

from __future__ import annotations

from .barrier import PendingSet, make_completion_handler
from .client import PipeWireClient
from .config import load_session_config
from .context import RoundtripContext, Subscription
from .errors import (
    PodDecodeError,
    PwAudioError,
    PwBindError,
    PwConfigError,
    PwConnectionError,
    PwNotConnectedError,
    PwProtocolError,
    PwRemoteError,
)
from .events import GlobalAdded, GlobalRemoved, MetadataProperty, NodeInfo
from .roundtrip import roundtrip
from .session import Session, SessionConfig
from .states import Device, Direction, ObjectStore, Settings

__all__ = [
    "Device",
    "Direction",
    "GlobalAdded",
    "GlobalRemoved",
    "MetadataProperty",
    "NodeInfo",
    "ObjectStore",
    "PendingSet",
    "PipeWireClient",
    "PodDecodeError",
    "PwAudioError",
    "PwBindError",
    "PwConfigError",
    "PwConnectionError",
    "PwNotConnectedError",
    "PwProtocolError",
    "PwRemoteError",
    "RoundtripContext",
    "Session",
    "SessionConfig",
    "Settings",
    "Subscription",
    "load_session_config",
    "make_completion_handler",
    "roundtrip",
]
