"""QMP transport over a UNIX domain socket.

Implements :class:`~qmp_shell.core.protocols.Monitor`.  This module is
the **only** place in the codebase that touches sockets.  All socket
and JSON decoding exceptions are caught here and re-raised as typed
:class:`~qmp_shell.exceptions.TransportError` subclasses — nothing raw
escapes the infrastructure boundary.

Wire format: one JSON object per line in each direction.  After
connecting, QEMU sends a ``{"QMP": ...}`` greeting and the client must
negotiate capabilities before issuing commands.  Asynchronous
``{"event": ...}`` messages may arrive at any time; they are buffered
until :meth:`QmpMonitor.find_events` is called.
"""

from __future__ import annotations

import json
import logging
import socket
from typing import Any

from qmp_shell.core.models import Command, QmpEvent
from qmp_shell.exceptions import (
    ConnectionFailedError,
    QmpCommandError,
    TransportError,
    TransportTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 60.0

_RECV_SIZE: int = 4096


class QmpMonitor:
    """Synchronous QMP client bound to one UNIX socket.

    Usage::

        with QmpMonitor("/run/vm.qmp") as monitor:
            monitor.run(Command("query-status"))

    Parameters
    ----------
    socket_path:
        Filesystem path of the QMP socket.
    timeout:
        Seconds to wait for any single reply.
    """

    def __init__(self, socket_path: str, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.socket_path: str = socket_path
        self.timeout: float = timeout
        self._sock: socket.socket | None = None
        self._buffer: bytes = b""
        self._events: list[QmpEvent] = []

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> QmpMonitor:
        self.connect()
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """Open the socket and complete the QMP handshake.

        Raises
        ------
        ConnectionFailedError
            When the socket cannot be opened or the greeting is invalid.
        """
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.socket_path)
        except OSError as exc:
            sock.close()
            raise ConnectionFailedError(
                f"cannot connect to the socket: {self.socket_path}",
                hint="Check that QEMU was started with -qmp unix:<path>,server",
            ) from exc
        self.attach(sock)

    def attach(self, sock: socket.socket) -> None:
        """Adopt an already connected socket and perform the handshake."""
        sock.settimeout(self.timeout)
        self._sock = sock
        self._buffer = b""
        try:
            greeting = self._read_message()
            if "QMP" not in greeting:
                raise ConnectionFailedError(
                    f"unexpected greeting from {self.socket_path}: {greeting}",
                )
            logger.debug("greeting: %s", greeting["QMP"])
            self.run(Command("qmp_capabilities"))
        except TransportError:
            self.close()
            raise

    def close(self) -> None:
        """Close the socket.  Safe to call more than once."""
        sock = self._sock
        self._sock = None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as exc:
            logger.debug("error closing monitor socket: %s", exc)

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def run(self, command: Command) -> Any:
        """Execute *command* and return the ``return`` member of the reply.

        Events received while waiting are buffered.

        Raises
        ------
        QmpCommandError
            When QEMU replies with an ``error`` object.
        TransportTimeoutError
            When no reply arrives within :attr:`timeout`.
        ConnectionFailedError
            When the connection drops.
        """
        self._send(command.to_wire())
        while True:
            message = self._read_message()
            if "event" in message:
                self._store_event(message)
                continue
            if "return" in message:
                return message["return"]
            if "error" in message:
                error = message["error"] or {}
                raise QmpCommandError(
                    str(error.get("class", "GenericError")),
                    str(error.get("desc", "unknown error")),
                )
            logger.debug("ignoring unexpected message: %s", message)

    def find_events(self, since: int) -> list[QmpEvent]:
        """Collect pending events and return those at or after *since*.

        Events older than *since* are discarded from the buffer.
        """
        self._drain()
        self._events = [event for event in self._events if event.seconds >= since]
        return list(self._events)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionFailedError("not connected to the monitor")
        return self._sock

    def _send(self, payload: dict[str, Any]) -> None:
        sock = self._require_socket()
        data = json.dumps(payload).encode("utf-8") + b"\n"
        logger.debug("-> %s", payload)
        try:
            sock.sendall(data)
        except OSError as exc:
            raise ConnectionFailedError(f"cannot send to the monitor: {exc}") from exc

    def _recv(self, sock: socket.socket) -> bytes:
        try:
            chunk = sock.recv(_RECV_SIZE)
        except socket.timeout as exc:
            raise TransportTimeoutError(
                f"no reply from the monitor within {self.timeout:g}s",
            ) from exc
        except OSError as exc:
            raise ConnectionFailedError(f"cannot read from the monitor: {exc}") from exc
        if not chunk:
            raise ConnectionFailedError("connection closed by the monitor")
        return chunk

    def _next_line(self) -> bytes | None:
        if b"\n" not in self._buffer:
            return None
        line, self._buffer = self._buffer.split(b"\n", 1)
        return line

    def _read_message(self) -> dict[str, Any]:
        sock = self._require_socket()
        while True:
            line = self._next_line()
            if line is None:
                self._buffer += self._recv(sock)
                continue
            if not line.strip():
                continue
            return self._decode(line)

    @staticmethod
    def _decode(line: bytes) -> dict[str, Any]:
        try:
            message = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TransportError(f"malformed message from the monitor: {exc}") from exc
        if not isinstance(message, dict):
            raise TransportError(f"malformed message from the monitor: {message!r}")
        logger.debug("<- %s", message)
        return message

    def _drain(self) -> None:
        """Read whatever is already waiting on the socket without blocking."""
        sock = self._require_socket()
        sock.setblocking(False)
        try:
            while True:
                try:
                    chunk = sock.recv(_RECV_SIZE)
                except BlockingIOError:
                    break
                except OSError as exc:
                    raise ConnectionFailedError(
                        f"cannot read from the monitor: {exc}",
                    ) from exc
                if not chunk:
                    raise ConnectionFailedError("connection closed by the monitor")
                self._buffer += chunk
        finally:
            sock.settimeout(self.timeout)

        while True:
            line = self._next_line()
            if line is None:
                break
            if not line.strip():
                continue
            message = self._decode(line)
            if "event" in message:
                self._store_event(message)
            else:
                logger.debug("ignoring unexpected message: %s", message)

    def _store_event(self, message: dict[str, Any]) -> None:
        timestamp = message.get("timestamp") or {}
        self._events.append(
            QmpEvent(
                type=str(message["event"]),
                data=message.get("data"),
                seconds=int(timestamp.get("seconds", 0)),
                microseconds=int(timestamp.get("microseconds", 0)),
            )
        )
