"""
pwaudio_lib/proxy.py

Client-side proxies for remote objects.

A proxy is addressed by a client-allocated id, marshals method calls through
the client's session, and fans decoded events out to its listeners. Proxies
are only weakly referenced by the dispatcher: whoever binds one must keep it
(and its listeners) alive for events to keep arriving.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Sequence

from .const import (
    TYPE_CORE,
    TYPE_METADATA,
    TYPE_NODE,
    TYPE_REGISTRY,
    VERSION_CORE,
    VERSION_METADATA,
    VERSION_NODE,
    VERSION_REGISTRY,
    RegistryMethod,
)
from .errors import PwBindError
from .events import (
    CoreDone,
    CoreError,
    CoreInfo,
    CorePing,
    CoreRemoveId,
    Event,
    GlobalAdded,
    GlobalRemoved,
    MetadataProperty,
    NodeInfo,
)

if TYPE_CHECKING:
    from .client import PipeWireClient

logger = logging.getLogger(__name__)

EventCallback = Callable[[Any], None]


class Listener:
    """Handle for one registered callback; remove() detaches it."""

    def __init__(self, proxy: "Proxy", kind: str, callback: EventCallback) -> None:
        self.proxy = proxy
        self.kind = kind
        self.callback = callback

    def remove(self) -> None:
        self.proxy._remove_listener(self)


class Proxy:
    interface: ClassVar[str]
    version: ClassVar[int]

    def __init__(self, client: "PipeWireClient", obj_id: int) -> None:
        self.client = client
        self.id = obj_id
        self._listeners: dict[str, list[Listener]] = {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id}>"

    def add_listener(self, kind: str, callback: EventCallback) -> Listener:
        listener = Listener(self, kind, callback)
        self._listeners.setdefault(kind, []).append(listener)
        return listener

    def _remove_listener(self, listener: Listener) -> None:
        listeners = self._listeners.get(listener.kind)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, evt: Event) -> None:
        # Copy: a callback may add or remove listeners while we iterate.
        for listener in list(self._listeners.get(evt.kind, ())):
            listener.callback(evt)

    def _call(self, opcode: int, args: Sequence[Any]) -> int:
        return self.client.session.send_message(self.id, opcode, args)


class CoreProxy(Proxy):
    interface = TYPE_CORE
    version = VERSION_CORE

    def on_info(self, callback: Callable[[CoreInfo], None]) -> Listener:
        return self.add_listener(CoreInfo.KIND, callback)

    def on_done(self, callback: Callable[[CoreDone], None]) -> Listener:
        return self.add_listener(CoreDone.KIND, callback)

    def on_ping(self, callback: Callable[[CorePing], None]) -> Listener:
        return self.add_listener(CorePing.KIND, callback)

    def on_error(self, callback: Callable[[CoreError], None]) -> Listener:
        return self.add_listener(CoreError.KIND, callback)

    def on_remove_id(self, callback: Callable[[CoreRemoveId], None]) -> Listener:
        return self.add_listener(CoreRemoveId.KIND, callback)


class NodeProxy(Proxy):
    interface = TYPE_NODE
    version = VERSION_NODE

    def subscribe_info(self, callback: Callable[[NodeInfo], None]) -> Listener:
        """Fires with the node's full info after bind, and again on every info change."""
        return self.add_listener(NodeInfo.KIND, callback)


class MetadataProxy(Proxy):
    interface = TYPE_METADATA
    version = VERSION_METADATA

    def subscribe_property(self, callback: Callable[[MetadataProperty], None]) -> Listener:
        """Fires once per property; the current properties are replayed after bind."""
        return self.add_listener(MetadataProperty.KIND, callback)


BINDABLE_PROXIES: dict[str, type[Proxy]] = {
    TYPE_NODE: NodeProxy,
    TYPE_METADATA: MetadataProxy,
}


class RegistryProxy(Proxy):
    interface = TYPE_REGISTRY
    version = VERSION_REGISTRY

    def enumerate_globals(self, on_global: Callable[[GlobalAdded], None]) -> Listener:
        """
        Subscribe to global announcements. Existing globals are announced
        first, then additions as they happen.
        """
        return self.add_listener(GlobalAdded.KIND, on_global)

    def subscribe_global_remove(self, callback: Callable[[GlobalRemoved], None]) -> Listener:
        return self.add_listener(GlobalRemoved.KIND, callback)

    def bind(self, global_obj: GlobalAdded) -> Proxy:
        """
        Bind a discovered global and return its proxy.

        The bind is answered asynchronously; a refusal arrives as a core error.
        """
        proxy_cls = BINDABLE_PROXIES.get(global_obj.type)
        if proxy_cls is None:
            raise PwBindError(f"cannot bind global {global_obj.id}: unsupported type {global_obj.type!r}")
        version = min(global_obj.version, proxy_cls.version)
        proxy = self.client.create_proxy(proxy_cls)
        self._call(RegistryMethod.BIND, [global_obj.id, proxy_cls.interface, version, proxy.id])
        logger.debug("Bound global id=%s type=%s as proxy id=%s", global_obj.id, global_obj.type, proxy.id)
        return proxy
