"""Tests for the QMP socket transport (infra/qmp_monitor.py).

A :func:`socket.socketpair` stands in for QEMU: the "server" end is
pre-loaded with every message QEMU would send, so no threads are
needed.  These tests verify:

* Greeting and capability negotiation
* Request encoding and ``return``/``error`` handling
* Event buffering during commands and via non-blocking polls
* Mapping of timeouts, disconnects and garbage to typed errors
"""

from __future__ import annotations

import json
import socket
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from qmp_shell.core.models import Command, IntegerValue
from qmp_shell.exceptions import (
    ConnectionFailedError,
    QmpCommandError,
    TransportError,
    TransportTimeoutError,
)
from qmp_shell.infra.qmp_monitor import QmpMonitor

GREETING: dict[str, Any] = {
    "QMP": {
        "version": {"qemu": {"major": 8, "minor": 2, "micro": 1}, "package": ""},
        "capabilities": ["oob"],
    }
}
CAPABILITIES_OK: dict[str, Any] = {"return": {}}


def _wire(*messages: dict[str, Any]) -> bytes:
    return b"".join(json.dumps(m).encode("utf-8") + b"\r\n" for m in messages)


def _event(name: str, seconds: int, data: Any = None) -> dict[str, Any]:
    message: dict[str, Any] = {
        "event": name,
        "timestamp": {"seconds": seconds, "microseconds": 42},
    }
    if data is not None:
        message["data"] = data
    return message


def _sent_requests(server: socket.socket) -> list[dict[str, Any]]:
    server.settimeout(1.0)
    data = server.recv(65536)
    return [json.loads(line) for line in data.splitlines() if line]


@pytest.fixture
def pair() -> Iterator[tuple[socket.socket, socket.socket]]:
    server, client = socket.socketpair()
    yield server, client
    server.close()
    client.close()


def _attached(
    pair: tuple[socket.socket, socket.socket],
    *after_handshake: dict[str, Any],
    timeout: float = 1.0,
) -> QmpMonitor:
    server, client = pair
    server.sendall(_wire(GREETING, CAPABILITIES_OK, *after_handshake))
    monitor = QmpMonitor("test.sock", timeout=timeout)
    monitor.attach(client)
    return monitor


# ---------------------------------------------------------------------------
# Handshake
# ---------------------------------------------------------------------------

class TestHandshake:
    def test_negotiates_capabilities(self, pair: tuple[socket.socket, socket.socket]) -> None:
        _attached(pair)
        assert _sent_requests(pair[0]) == [{"execute": "qmp_capabilities"}]

    def test_bad_greeting(self, pair: tuple[socket.socket, socket.socket]) -> None:
        server, client = pair
        server.sendall(_wire({"hello": "world"}))
        monitor = QmpMonitor("test.sock", timeout=1.0)
        with pytest.raises(ConnectionFailedError, match="unexpected greeting"):
            monitor.attach(client)

    def test_connect_to_missing_socket(self, tmp_path: Path) -> None:
        monitor = QmpMonitor(str(tmp_path / "missing.sock"), timeout=1.0)
        with pytest.raises(ConnectionFailedError, match="cannot connect to the socket") as exc_info:
            monitor.connect()
        assert exc_info.value.hint is not None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestRun:
    def test_returns_return_member(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair, {"return": {"status": "running", "running": True}})
        assert monitor.run(Command("query-status")) == {
            "status": "running",
            "running": True,
        }

    def test_encodes_arguments(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair, {"return": {}})
        monitor.run(Command("balloon", {"value": IntegerValue(1024)}))
        requests = _sent_requests(pair[0])
        assert requests[-1] == {"execute": "balloon", "arguments": {"value": 1024}}

    def test_error_reply(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(
            pair,
            {"error": {"class": "CommandNotFound", "desc": "The command foo has not been found"}},
        )
        with pytest.raises(QmpCommandError) as exc_info:
            monitor.run(Command("foo"))
        assert exc_info.value.error_class == "CommandNotFound"
        assert "has not been found" in str(exc_info.value)

    def test_events_during_command_are_buffered(
        self, pair: tuple[socket.socket, socket.socket],
    ) -> None:
        monitor = _attached(pair, _event("STOP", 100), {"return": {}})
        assert monitor.run(Command("stop")) == {}
        events = monitor.find_events(0)
        assert [(e.type, e.seconds, e.microseconds) for e in events] == [("STOP", 100, 42)]

    def test_timeout(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair, timeout=0.05)
        with pytest.raises(TransportTimeoutError):
            monitor.run(Command("query-status"))

    def test_connection_closed(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair)
        pair[0].close()
        with pytest.raises(ConnectionFailedError):
            monitor.run(Command("query-status"))

    def test_garbage_reply(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair)
        pair[0].sendall(b"this is not json\r\n")
        with pytest.raises(TransportError, match="malformed message"):
            monitor.run(Command("query-status"))

    def test_run_after_close(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair)
        monitor.close()
        monitor.close()
        with pytest.raises(ConnectionFailedError, match="not connected"):
            monitor.run(Command("query-status"))


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class TestFindEvents:
    def test_polls_without_blocking(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair, timeout=5.0)
        assert monitor.find_events(0) == []

    def test_collects_waiting_events(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair)
        pair[0].sendall(_wire(_event("RESUME", 7, {"reason": "user"})))
        events = monitor.find_events(0)
        assert len(events) == 1
        assert events[0].type == "RESUME"
        assert events[0].data == {"reason": "user"}

    def test_filters_and_prunes_older_events(
        self, pair: tuple[socket.socket, socket.socket],
    ) -> None:
        monitor = _attached(pair, _event("STOP", 5), _event("RESUME", 10))
        assert [e.type for e in monitor.find_events(6)] == ["RESUME"]
        assert [e.type for e in monitor.find_events(0)] == ["RESUME"]

    def test_restores_blocking_timeout(self, pair: tuple[socket.socket, socket.socket]) -> None:
        monitor = _attached(pair, timeout=0.05)
        monitor.find_events(0)
        with pytest.raises(TransportTimeoutError):
            monitor.run(Command("query-status"))
