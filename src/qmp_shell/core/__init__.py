"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from qmp_shell.core.command_builder import build
from qmp_shell.core.completion import CompletionIndex
from qmp_shell.core.models import (
    BoolValue,
    Command,
    IntegerValue,
    QemuVersion,
    QmpEvent,
    SessionInfo,
    StringValue,
    StructuredValue,
    Value,
)
from qmp_shell.core.modes import LEGACY_TEXT, STRUCTURED, ShellMode, mode_for
from qmp_shell.core.protocols import Monitor
from qmp_shell.core.shell_service import ShellService

__all__: list[str] = [
    "LEGACY_TEXT",
    "STRUCTURED",
    "BoolValue",
    "Command",
    "CompletionIndex",
    "IntegerValue",
    "Monitor",
    "QemuVersion",
    "QmpEvent",
    "SessionInfo",
    "ShellMode",
    "ShellService",
    "StringValue",
    "StructuredValue",
    "Value",
    "build",
    "mode_for",
]
