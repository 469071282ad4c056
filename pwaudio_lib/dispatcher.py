"""
pwaudio_lib/dispatcher.py

Inbound frame routing.

- Objects: client-allocated id -> proxy. Held weakly: a proxy nobody owns
  receives nothing, and frames addressed to it are dropped.
- Routes: (interface type, opcode) -> decoder returning a typed Event.
- The dispatcher stamps (obj_id, seq) onto the decoded event and hands it to
  the proxy, which fans it out to its listeners.
"""

from __future__ import annotations

import logging
import weakref
from dataclasses import replace
from typing import Any, Callable, Optional, Protocol, Sequence

from . import pod
from .events import Event
from .framing import Frame

logger = logging.getLogger(__name__)

RouteKey = tuple[str, int]
DecodeFn = Callable[[Sequence[Any]], Event]


class EventTarget(Protocol):
    interface: str

    def emit(self, evt: Event) -> None: ...


class Dispatcher:
    def __init__(self) -> None:
        self._handlers: dict[RouteKey, DecodeFn] = {}
        self._objects: weakref.WeakValueDictionary[int, EventTarget] = weakref.WeakValueDictionary()

    # --------------------------
    # Registration
    # --------------------------

    def register_handler(self, route: RouteKey, decoder: DecodeFn) -> None:
        if route in self._handlers:
            raise ValueError(f"handler already registered for route {route!r}")
        self._handlers[route] = decoder

    def add_object(self, obj_id: int, target: EventTarget) -> None:
        existing = self._objects.get(obj_id)
        if existing is not None and existing is not target:
            raise ValueError(f"object id {obj_id} is already in use")
        self._objects[obj_id] = target

    def remove_object(self, obj_id: int) -> None:
        self._objects.pop(obj_id, None)

    def get_object(self, obj_id: int) -> Optional[EventTarget]:
        return self._objects.get(obj_id)

    # --------------------------
    # Dispatch
    # --------------------------

    def dispatch(self, frame: Frame) -> Optional[Event]:
        """
        Decode one frame and deliver it to its proxy.

        Returns the delivered event, or None when the frame was dropped
        (unknown/released object id, or an event we have no decoder for).
        Decoding failures raise PodDecodeError.
        """
        target = self._objects.get(frame.obj_id)
        if target is None:
            logger.debug("Dropping event op=%s for unknown object id=%s", frame.opcode, frame.obj_id)
            return None

        route = (target.interface, frame.opcode)
        decoder = self._handlers.get(route)
        if decoder is None:
            logger.debug("No decoder for route %s on object id=%s", route, frame.obj_id)
            return None

        args = pod.decode_struct(frame.payload)
        evt = replace(decoder(args), obj_id=frame.obj_id, seq=frame.seq)
        target.emit(evt)
        return evt
