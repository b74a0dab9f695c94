"""Custom exception hierarchy for qmp-shell.

All exceptions that cross layer boundaries must inherit from
:class:`QmpShellError`.  Raw socket and JSON exceptions must NEVER
propagate beyond the infrastructure layer — they are caught there and
re-raised as a typed subclass defined here.

Hierarchy
---------
QmpShellError
├── CommandBuildError
│   ├── EmptyCommandError
│   ├── MalformedArgumentError
│   └── InvalidStructuredValueError
├── TransportError
│   ├── ConnectionFailedError
│   ├── TransportTimeoutError
│   └── QmpCommandError
├── StartupError
├── HistoryError
└── EnvironmentError
"""

from __future__ import annotations

COMMAND_FORMAT: str = "<command-name> [arg-name1=arg1] ... [arg-nameN=argN]"


class QmpShellError(Exception):
    """Base exception for all qmp-shell errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundaries can render a clean
    message without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command construction --------------------------------------------------

class CommandBuildError(QmpShellError):
    """Raised when an input line cannot be turned into a command."""


class EmptyCommandError(CommandBuildError):
    """Raised when a line contains no tokens at all."""

    def __init__(self) -> None:
        super().__init__(
            "empty command",
            hint=f"command format: {COMMAND_FORMAT}",
        )


class MalformedArgumentError(CommandBuildError):
    """Raised when an argument token is not a ``key=value`` pair."""

    def __init__(self, token: str) -> None:
        super().__init__(
            f"malformed argument: {token}",
            hint=f"command format: {COMMAND_FORMAT}",
        )
        self.token: str = token


class InvalidStructuredValueError(CommandBuildError):
    """Raised when a ``{``/``[`` argument value is not valid JSON."""

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"JSON parsing error: {reason}")
        self.value: str = value
        self.reason: str = reason


# --- Transport -------------------------------------------------------------

class TransportError(QmpShellError):
    """Raised when the monitor connection fails or the remote side errors."""


class ConnectionFailedError(TransportError):
    """Raised when the monitor socket cannot be opened or drops."""


class TransportTimeoutError(TransportError):
    """Raised when no reply arrives within the monitor timeout."""


class QmpCommandError(TransportError):
    """Raised when QEMU answers a command with an ``error`` object."""

    def __init__(self, error_class: str, description: str) -> None:
        super().__init__(f"{error_class}: {description}")
        self.error_class: str = error_class
        self.description: str = description


# --- Session lifecycle -----------------------------------------------------

class StartupError(QmpShellError):
    """Raised when the shell cannot gather its initial session data."""


class HistoryError(QmpShellError):
    """Raised when the history file cannot be read or written."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(QmpShellError):
    """Raised when a required runtime dependency is not available."""
