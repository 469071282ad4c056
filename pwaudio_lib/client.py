"""
Client facade for a PipeWire daemon.

This wraps Session + Dispatcher + proxies with the small surface the
roundtrip needs:
- connect / close
- get_registry (enumerate_globals and bind live on the returned proxy)
- request_barrier / on_barrier_reached
- run / stop (single-threaded dispatch loop)
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from .config import load_session_config
from .const import PW_ID_CORE, VERSION_REGISTRY, CoreMethod, async_seq
from .dispatcher import Dispatcher
from .errors import PwRemoteError
from .events import CoreDone, CoreError, CoreInfo, CorePing, CoreRemoveId
from .framing import Frame
from .handlers import core as core_handlers
from .handlers import metadata as metadata_handlers
from .handlers import node as node_handlers
from .handlers import registry as registry_handlers
from .proxy import CoreProxy, Listener, Proxy, RegistryProxy
from .session import Session, SessionConfig

P = TypeVar("P", bound=Proxy)

# Ids 0 (core) and 1 (client) are implicit; the daemon expects new ids without gaps.
_FIRST_PROXY_ID = 2

_HANDLER_MODULES = (core_handlers, registry_handlers, node_handlers, metadata_handlers)


class PipeWireClient:
    """
    Single-session client. Every callback runs on the thread that calls run().
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        *,
        session: Optional[Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._log = logger or logging.getLogger(__name__)
        if session is None:
            if config is None:
                config = load_session_config()
            session = Session(config)
        self.session = session
        self.session.on_message = self._on_frame

        self.dispatcher = Dispatcher()
        for module in _HANDLER_MODULES:
            module.register(self.dispatcher)

        self._next_id = _FIRST_PROXY_ID
        self._running = False

        self.core = CoreProxy(self, PW_ID_CORE)
        self.dispatcher.add_object(PW_ID_CORE, self.core)
        self.core.on_info(self._on_core_info)
        self.core.on_ping(self._on_core_ping)
        self.core.on_error(self._on_core_error)
        self.core.on_remove_id(self._on_core_remove_id)

    # --------------------------
    # Lifecycle
    # --------------------------

    def connect(self) -> None:
        """Connect and introduce ourselves. Failures raise PwConnectionError."""
        self.session.connect()

    def close(self) -> None:
        self._running = False
        self.session.close()

    @property
    def running(self) -> bool:
        return self._running

    def run(self) -> None:
        """
        Dispatch events until stop() is called.

        stop() only takes effect between events: the callback that calls it
        always runs to completion first.
        """
        self._running = True
        self._log.debug("Dispatch loop started")
        try:
            while self._running:
                self.session.pump_once()
        finally:
            self._running = False
        self._log.debug("Dispatch loop stopped")

    def stop(self) -> None:
        self._running = False

    # --------------------------
    # Objects
    # --------------------------

    def create_proxy(self, proxy_cls: type[P]) -> P:
        proxy = proxy_cls(self, self._next_id)
        self._next_id += 1
        self.dispatcher.add_object(proxy.id, proxy)
        return proxy

    def get_registry(self) -> RegistryProxy:
        registry = self.create_proxy(RegistryProxy)
        self.session.send_message(PW_ID_CORE, CoreMethod.GET_REGISTRY, [VERSION_REGISTRY, registry.id])
        return registry

    # --------------------------
    # Barriers
    # --------------------------

    def request_barrier(self) -> int:
        """
        Ask the daemon for a synchronization point.

        Returns the correlation token echoed by the matching done event. Every
        message sent before this one is answered before that event arrives.
        """
        token = async_seq(self.session.next_seq)
        self.session.send_message(PW_ID_CORE, CoreMethod.SYNC, [PW_ID_CORE, token])
        self._log.debug("Barrier requested token=%#x", token)
        return token

    def on_barrier_reached(self, callback: Callable[[int, int], None]) -> Listener:
        """callback(id, token) fires for every done event."""

        def _on_done(evt: CoreDone) -> None:
            callback(evt.id, evt.token)

        return self.core.on_done(_on_done)

    # --------------------------
    # Internal event handling
    # --------------------------

    def _on_frame(self, frame: Frame) -> None:
        self.dispatcher.dispatch(frame)

    def _on_core_info(self, evt: CoreInfo) -> None:
        self._log.info("Connected to %s (version %s, user %s)", evt.name, evt.version, evt.user_name)

    def _on_core_ping(self, evt: CorePing) -> None:
        self.session.send_message(PW_ID_CORE, CoreMethod.PONG, [evt.id, evt.ping_seq])

    def _on_core_error(self, evt: CoreError) -> None:
        self._log.error("Daemon error on object id=%s seq=%s res=%s: %s", evt.id, evt.error_seq, evt.res, evt.message)
        raise PwRemoteError(id=evt.id, seq=evt.error_seq, res=evt.res, message=evt.message)

    def _on_core_remove_id(self, evt: CoreRemoveId) -> None:
        self._log.debug("Daemon released object id=%s", evt.id)
        self.dispatcher.remove_object(evt.id)
