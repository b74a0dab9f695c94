"""Shared pytest fixtures and configuration for the qmp-shell test suite.

Guidelines
----------
* No QEMU process in any test.
* The monitor is faked at the protocol boundary; only the transport
  tests touch real (paired) sockets.
* Core tests must be pure — no side effects.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from qmp_shell.core.models import Command


class RecordingSink:
    """``print``-compatible sink that keeps every printed line."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def print(self, *objects: object) -> None:
        self.lines.append(" ".join(str(obj) for obj in objects))


def fake_monitor(replies: dict[str, Any]) -> MagicMock:
    """Return a mock Monitor answering by command name.

    Values that are exceptions are raised; callables receive the
    :class:`Command` and return the reply.
    """
    monitor = MagicMock()

    def _run(command: Command) -> Any:
        reply = replies[command.name]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(command)
        return reply

    monitor.run.side_effect = _run
    monitor.find_events.return_value = []
    return monitor


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def qmp_replies() -> dict[str, Any]:
    """Replies of a healthy VM named ``vm0`` running QEMU 8.2.1."""
    return {
        "query-name": {"name": "vm0"},
        "query-version": {
            "qemu": {"major": 8, "minor": 2, "micro": 1},
            "package": "",
        },
        "query-commands": [
            {"name": "query-status"},
            {"name": "query-block"},
            {"name": "stop"},
            {"name": "cont"},
        ],
        "query-status": {"running": True, "status": "running"},
    }


@pytest.fixture
def make_monitor() -> Any:
    """Factory fixture around :func:`fake_monitor`."""
    return fake_monitor
