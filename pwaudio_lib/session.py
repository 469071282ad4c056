"""
PipeWire native-protocol session.

Responsibilities:
- Own the UNIX socket lifecycle.
- Send Core.hello and Client.update_properties after connect.
- Encode outbound method calls as framed Struct PODs with a per-message seq.
- Provide a framed receive pump using framing.DeframeState + framing.deframe_feed(state, chunk).
- Surface inbound frames via a callback (on_message) or via recv_message().

Non-responsibilities (explicit):
- Object ids, proxies and event decoding (belongs to the dispatcher/client).
- Any retry, reconnect or timeout policy.
"""

from __future__ import annotations

import array
import logging
import os
import socket
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from . import pod
from .const import (
    ASYNC_SEQ_MASK,
    KEY_APPLICATION_NAME,
    PW_ID_CLIENT,
    PW_ID_CORE,
    VERSION_CORE,
    ClientMethod,
    CoreMethod,
)
from .errors import PwConnectionError, PwNotConnectedError
from .framing import DeframeState, Frame, deframe_feed, frame_build

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    socket_path: str
    io_timeout_s: Optional[float] = None   # None blocks until the daemon sends something
    recv_max_bytes: int = 65536            # per socket recvmsg() call
    max_fds: int = 28                      # ancillary fd slots per recvmsg() call
    wire_log: bool = False                 # enable raw RX/TX hex dump logging
    application_name: str = "pwaudio"


class SessionState(str, Enum):
    """Connection lifecycle states."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    ACTIVE = "active"


class SessionError(Exception):
    """Base exception for Session failures."""


class SessionNotReadyError(SessionError, PwNotConnectedError):
    """Raised when an operation requires an ACTIVE session."""


class SessionIOError(SessionError, PwConnectionError):
    """Raised when the underlying transport fails."""


class Session:
    """
    Minimal native-protocol connection.

    Typical usage:
        s = Session(SessionConfig(socket_path="/run/user/1000/pipewire-0"))
        s.connect()                                # sends hello + client properties
        seq = s.send_message(0, CoreMethod.SYNC, [0, 0])
        frame = s.recv_message()                   # or s.pump_once() to dispatch via callback
    """

    def __init__(self, cfg: SessionConfig) -> None:
        self.cfg = cfg

        self.sock: Optional[socket.socket] = None
        self._deframe_state: Optional[DeframeState] = None
        self._rx_frames: deque[Frame] = deque()

        self.state: SessionState = SessionState.DISCONNECTED
        self.last_error: Exception | None = None

        self._tx_seq = 0
        self._rx_count = 0

        # Event hooks (optional)
        self.on_message: Optional[Callable[[Frame], None]] = None
        self.on_disconnected: Optional[Callable[[Exception | None], None]] = None

    # --------------------------
    # Connection lifecycle
    # --------------------------

    def connect(self) -> None:
        """
        Connect to the daemon socket and introduce ourselves.
        """
        if self.state is not SessionState.DISCONNECTED:
            self.close()

        self.last_error = None
        self.state = SessionState.CONNECTING

        logger.info("PipeWire session connecting to %s", self.cfg.socket_path)
        s = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            s.connect(self.cfg.socket_path)
        except OSError as e:
            self.last_error = e
            self.state = SessionState.DISCONNECTED
            s.close()
            raise SessionIOError(f"Failed to connect to {self.cfg.socket_path}: {e}") from e

        s.settimeout(self.cfg.io_timeout_s)
        self.sock = s
        self._deframe_state = DeframeState()
        self._rx_frames.clear()
        self._tx_seq = 0
        self.state = SessionState.ACTIVE

        self.send_message(PW_ID_CORE, CoreMethod.HELLO, [VERSION_CORE])
        self.send_message(
            PW_ID_CLIENT,
            ClientMethod.UPDATE_PROPERTIES,
            [pod.dict_struct({KEY_APPLICATION_NAME: self.cfg.application_name})],
        )
        logger.debug("PipeWire hello sent on %s", self.cfg.socket_path)

    def close(self) -> None:
        """
        Close the socket. Safe to call multiple times.
        """
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError:
                pass
        self.sock = None
        self._deframe_state = None
        self._rx_frames.clear()
        self.state = SessionState.DISCONNECTED

    # --------------------------
    # Transport helpers
    # --------------------------

    def _require_ready(self) -> None:
        if self.state is not SessionState.ACTIVE or self.sock is None or self._deframe_state is None:
            raise SessionNotReadyError("Session is not ACTIVE/ready (call connect() successfully first).")

    def _recv_some(self, *, max_bytes: int) -> bytes:
        """
        Read from the socket; may raise TimeoutError or SessionIOError.
        Kept as a method so tests can monkeypatch it.
        """
        self._require_ready()
        assert self.sock is not None

        try:
            data, ancdata, _flags, _addr = self.sock.recvmsg(
                max_bytes, socket.CMSG_SPACE(self.cfg.max_fds * array.array("i").itemsize)
            )
        except socket.timeout as e:
            raise TimeoutError("Timed out waiting for data from the daemon.") from e
        except OSError as e:
            raise SessionIOError(f"Socket read failed from {self.cfg.socket_path}: {e}") from e

        self._close_passed_fds(ancdata)

        if not data:
            raise SessionIOError(f"Connection closed by the daemon ({self.cfg.socket_path}).")
        return data

    @staticmethod
    def _close_passed_fds(ancdata: Sequence[tuple[int, int, bytes]]) -> None:
        # We never map daemon memory; any fds passed to us are released immediately.
        for level, kind, data in ancdata:
            if level != socket.SOL_SOCKET or kind != socket.SCM_RIGHTS:
                continue
            fds = array.array("i")
            fds.frombytes(data[: len(data) - (len(data) % fds.itemsize)])
            for fd in fds:
                try:
                    os.close(fd)
                except OSError:
                    pass

    def _send_all(self, data: bytes) -> None:
        self._require_ready()
        assert self.sock is not None
        try:
            self.sock.sendall(data)
        except OSError as e:
            raise SessionIOError(f"Socket write failed to {self.cfg.socket_path}: {e}") from e

    # --------------------------
    # Public send/recv API
    # --------------------------

    @property
    def next_seq(self) -> int:
        """Seq the next send_message() call will use."""
        return self._tx_seq

    def send_message(self, obj_id: int, opcode: int, args: Sequence[Any]) -> int:
        """
        Encode args as a Struct POD and send it as one framed method call.

        Returns the message seq (the value a sync reply is correlated with).
        """
        self._require_ready()
        seq = self._tx_seq
        self._tx_seq = (seq + 1) & ASYNC_SEQ_MASK

        payload = pod.encode_struct(args)
        framed = frame_build(obj_id=obj_id, opcode=int(opcode), seq=seq, payload=payload)
        if self.cfg.wire_log and logger.isEnabledFor(logging.DEBUG):
            logger.debug("TX id=%s op=%s seq=%s (%d bytes): %s", obj_id, int(opcode), seq, len(framed), framed.hex())
        self._send_all(framed)
        return seq

    def recv_message(self) -> Frame:
        """
        Receive one complete frame, reading from the socket as needed.
        """
        self._require_ready()
        assert self._deframe_state is not None
        while not self._rx_frames:
            chunk = self._recv_some(max_bytes=self.cfg.recv_max_bytes)
            if self.cfg.wire_log and logger.isEnabledFor(logging.DEBUG):
                logger.debug("RX raw chunk (%d bytes): %s", len(chunk), chunk.hex())
            self._rx_frames.extend(deframe_feed(self._deframe_state, chunk))

        frame = self._rx_frames.popleft()
        self._rx_count += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "RX frame: id=%s op=%s seq=%s size=%d n_fds=%s",
                frame.obj_id,
                frame.opcode,
                frame.seq,
                len(frame.payload),
                frame.n_fds,
            )
        return frame

    def pump_once(self) -> Optional[Frame]:
        """
        One pump iteration: receive and dispatch exactly one frame if available.

        Returns:
            The frame if one was received, else None on timeout.
        """
        try:
            frame = self.recv_message()
        except TimeoutError:
            return None
        except SessionNotReadyError:
            raise
        except SessionIOError as e:
            logger.warning(
                "Session pump failed (%s) in state=%s for %s: %s",
                type(e).__name__,
                self.state.value,
                self.cfg.socket_path,
                e,
            )
            self._handle_disconnect(e)
            raise

        if self.on_message:
            self.on_message(frame)

        return frame

    def _handle_disconnect(self, err: Exception | None) -> None:
        self.last_error = err
        try:
            self.close()
        finally:
            if self.on_disconnected:
                self.on_disconnected(err)
