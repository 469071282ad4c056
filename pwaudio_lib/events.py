"""
pwaudio_lib/events.py

Event dataclasses for decoded daemon messages.

Rules:
- Handlers construct event objects directly, with placeholder header fields.
- The dispatcher stamps the authoritative header fields (object id, message seq)
  from the inbound frame before delivering the event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional


# -------------------------
# Common header (stamped by the dispatcher)
# -------------------------

@dataclass(frozen=True, slots=True)
class Event:
    kind: str
    obj_id: int
    seq: int


UNSET_OBJ_ID: int = -1
UNSET_SEQ: int = -1

Props = Mapping[str, Optional[str]]


# -------------------------
# Core events
# -------------------------

@dataclass(frozen=True, slots=True)
class CoreInfo(Event):
    KIND = "core_info"

    id: int
    cookie: int
    user_name: Optional[str]
    host_name: Optional[str]
    version: Optional[str]
    name: Optional[str]
    change_mask: int
    props: Props


@dataclass(frozen=True, slots=True)
class CoreDone(Event):
    """A barrier (sync) request was answered."""

    KIND = "core_done"

    id: int
    token: int


@dataclass(frozen=True, slots=True)
class CorePing(Event):
    KIND = "core_ping"

    id: int
    ping_seq: int


@dataclass(frozen=True, slots=True)
class CoreError(Event):
    KIND = "core_error"

    id: int
    error_seq: int
    res: int
    message: Optional[str]


@dataclass(frozen=True, slots=True)
class CoreRemoveId(Event):
    KIND = "core_remove_id"

    id: int


@dataclass(frozen=True, slots=True)
class CoreBoundId(Event):
    KIND = "core_bound_id"

    id: int
    global_id: int


@dataclass(frozen=True, slots=True)
class CoreBoundProps(Event):
    KIND = "core_bound_props"

    id: int
    global_id: int
    props: Props


# -------------------------
# Registry events
# -------------------------

@dataclass(frozen=True, slots=True)
class GlobalAdded(Event):
    """
    Discovered object descriptor.

    Transient: used to decide relevance and to bind; never stored.
    """

    KIND = "global_added"

    id: int
    permissions: int
    type: str
    version: int
    props: Props


@dataclass(frozen=True, slots=True)
class GlobalRemoved(Event):
    KIND = "global_removed"

    id: int


# -------------------------
# Node events
# -------------------------

@dataclass(frozen=True, slots=True)
class NodeInfo(Event):
    KIND = "node_info"

    id: int
    max_input_ports: int
    max_output_ports: int
    change_mask: int
    n_input_ports: int
    n_output_ports: int
    state: int
    error: Optional[str]
    props: Optional[Props]


# -------------------------
# Metadata events
# -------------------------

@dataclass(frozen=True, slots=True)
class MetadataProperty(Event):
    """One key/value change on a metadata object. value None means the key was removed."""

    KIND = "metadata_property"

    subject: int
    key: Optional[str]
    type: Optional[str]
    value: Optional[str]
