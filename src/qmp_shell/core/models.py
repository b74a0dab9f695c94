"""Domain models for qmp-shell.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from qmp_shell.core.completion import CompletionIndex


# ---------------------------------------------------------------------------
# Argument values (tagged union)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BoolValue:
    """A ``true``/``false`` literal."""

    value: bool


@dataclass(frozen=True, slots=True)
class IntegerValue:
    """A base-10 signed 64-bit integer."""

    value: int


@dataclass(frozen=True, slots=True)
class StructuredValue:
    """Parsed JSON data (object or array) given inline on the command line."""

    value: Any


@dataclass(frozen=True, slots=True)
class StringValue:
    """Any argument text that matched none of the other rules."""

    value: str


Value = Union[BoolValue, IntegerValue, StructuredValue, StringValue]


def to_wire(value: Value) -> Any:
    """Return the JSON-ready Python object carried by *value*."""
    match value:
        case BoolValue(value=flag):
            return flag
        case IntegerValue(value=number):
            return number
        case StructuredValue(value=data):
            return data
        case StringValue(value=text):
            return text
    raise TypeError(f"not an argument value: {value!r}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Command:
    """A single QMP command: a name plus typed arguments.

    The argument mapping is wrapped in a read-only proxy so the command
    cannot be altered after construction.
    """

    name: str
    arguments: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("command name must not be empty")
        object.__setattr__(
            self, "arguments", MappingProxyType(dict(self.arguments)),
        )

    def to_wire(self) -> dict[str, Any]:
        """Render the QMP ``execute`` request object."""
        request: dict[str, Any] = {"execute": self.name}
        if self.arguments:
            request["arguments"] = {
                key: to_wire(value) for key, value in self.arguments.items()
            }
        return request


# ---------------------------------------------------------------------------
# Session data
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class QemuVersion:
    """QEMU version triple reported by ``query-version``."""

    major: int
    minor: int
    micro: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.micro}"


@dataclass(frozen=True, slots=True)
class QmpEvent:
    """An asynchronous QMP event buffered by the monitor."""

    type: str
    """Event name (e.g. ``STOP``, ``BLOCK_JOB_COMPLETED``)."""

    data: Any
    """Event payload, ``None`` when QEMU sent none."""

    seconds: int
    """Timestamp seconds since the epoch."""

    microseconds: int
    """Sub-second part of the timestamp."""


@dataclass(frozen=True, slots=True)
class SessionInfo:
    """Facts gathered once when the shell connects."""

    vm_name: str
    """Guest name from ``query-name``; empty when the VM is unnamed."""

    version: QemuVersion
    """QEMU version from ``query-version``."""

    completions: CompletionIndex
    """Vocabulary offered for tab completion."""
