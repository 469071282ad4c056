"""Constants for the PipeWire native protocol (version 3)."""

from __future__ import annotations

from enum import IntEnum

PW_ID_CORE = 0
PW_ID_CLIENT = 1

DEFAULT_REMOTE = "pipewire-0"

# Interface type strings as announced by the registry.
TYPE_CORE = "PipeWire:Interface:Core"
TYPE_CLIENT = "PipeWire:Interface:Client"
TYPE_REGISTRY = "PipeWire:Interface:Registry"
TYPE_NODE = "PipeWire:Interface:Node"
TYPE_METADATA = "PipeWire:Interface:Metadata"

VERSION_CORE = 3
VERSION_CLIENT = 3
VERSION_REGISTRY = 3
VERSION_NODE = 3
VERSION_METADATA = 3

# Header layout: id, opcode<<24 | size, seq, n_fds.
HEADER_SIZE = 16
MAX_PAYLOAD_SIZE = 0xFFFFFF

# SPA_RESULT_RETURN_ASYNC(seq)
ASYNC_BIT = 0x40000000
ASYNC_SEQ_MASK = 0x3FFFFFFF


def async_seq(seq: int) -> int:
    return ASYNC_BIT | (seq & ASYNC_SEQ_MASK)


class CoreMethod(IntEnum):
    HELLO = 1
    SYNC = 2
    PONG = 3
    ERROR = 4
    GET_REGISTRY = 5


class CoreEvent(IntEnum):
    INFO = 0
    DONE = 1
    PING = 2
    ERROR = 3
    REMOVE_ID = 4
    BOUND_ID = 5
    ADD_MEM = 6
    REMOVE_MEM = 7
    BOUND_PROPS = 8


class ClientMethod(IntEnum):
    UPDATE_PROPERTIES = 2


class RegistryMethod(IntEnum):
    BIND = 1
    DESTROY = 2


class RegistryEvent(IntEnum):
    GLOBAL = 0
    GLOBAL_REMOVE = 1


class NodeEvent(IntEnum):
    INFO = 0
    PARAM = 1


class MetadataEvent(IntEnum):
    PROPERTY = 0


# Well-known property keys.
KEY_MEDIA_CLASS = "media.class"
KEY_METADATA_NAME = "metadata.name"
KEY_NODE_NAME = "node.name"
KEY_NODE_NICK = "node.nick"
KEY_NODE_DESCRIPTION = "node.description"
KEY_AUDIO_CHANNELS = "audio.channels"
KEY_QUANTUM_LIMIT = "clock.quantum-limit"
KEY_APPLICATION_NAME = "application.name"

MEDIA_CLASS_SINK = "Audio/Sink"
MEDIA_CLASS_SOURCE = "Audio/Source"
SETTINGS_METADATA_NAME = "settings"

UNKNOWN = "unknown"
DEFAULT_CHANNELS = 2
DEFAULT_BUFFER_LIMIT = 0
