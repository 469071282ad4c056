"""
pwaudio_lib/context.py

Per-roundtrip context handed to every callback.

All callbacks run on the dispatch thread, so the context is plain mutable
state: no locks, no shared-ownership wrappers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

from .barrier import PendingSet
from .states import ObjectStore


class RoundtripClient(Protocol):
    """The daemon operations a roundtrip needs (PipeWireClient satisfies this)."""

    def connect(self) -> None: ...

    def get_registry(self) -> Any: ...

    def request_barrier(self) -> int: ...

    def on_barrier_reached(self, callback: Callable[[int, int], None]) -> Any: ...

    def run(self) -> None: ...

    def stop(self) -> None: ...


@dataclass(slots=True)
class Subscription:
    """
    A bound remote object and the listener registered on it.

    Event delivery lasts exactly as long as this object is referenced.
    """

    global_id: int
    kind: str
    handle: Any
    listener: Any

    def release(self) -> None:
        self.listener.remove()


@dataclass(slots=True)
class RoundtripContext:
    client: RoundtripClient
    registry: Any
    pending: PendingSet
    store: ObjectStore = field(default_factory=ObjectStore)
    subscriptions: dict[int, Subscription] = field(default_factory=dict)
    settings_global_id: Optional[int] = None

    def track_barrier(self) -> int:
        """Issue a barrier request and track its token before returning."""
        token = self.client.request_barrier()
        self.pending.track(token)
        return token

    def teardown(self) -> None:
        for subscription in self.subscriptions.values():
            subscription.release()
        self.subscriptions.clear()
