"""
pwaudio_lib/states.py

Resolved entities and the object store.

Principles:
- Devices are created once, whole, per info event and appended.
- Settings is one record mutated field by field as property events arrive.
- No I/O, no logging, no protocol knowledge here: pure state storage,
  touched only from the dispatch thread.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    INPUT = "input"     # Audio/Sink: audio flows into the device
    OUTPUT = "output"   # Audio/Source: audio flows out of the device


@dataclass(frozen=True, slots=True)
class Device:
    id: int
    node_name: str
    nick_name: str
    description: str
    direction: Direction
    channels: int
    buffer_limit: int


@dataclass(slots=True)
class Settings:
    rate: Optional[int] = None
    allow_rates: list[int] = field(default_factory=list)
    quantum: Optional[int] = None
    min_quantum: Optional[int] = None
    max_quantum: Optional[int] = None
    force_rate: Optional[int] = None
    force_quantum: Optional[int] = None


@dataclass(slots=True)
class ObjectStore:
    devices: list[Device] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)

    def add_device(self, device: Device) -> None:
        self.devices.append(device)
