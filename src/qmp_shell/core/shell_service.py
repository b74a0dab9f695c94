"""Core shell service — startup queries, command execution, event polling.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~qmp_shell.core.protocols.Monitor` injected at
construction time (dependency inversion) and a
:class:`~qmp_shell.core.modes.ShellMode` selecting QMP or HMP
behaviour.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access.
* Only :class:`~qmp_shell.exceptions.QmpShellError` subclasses escape.
* The last-seen event timestamp is the only state kept across calls.
"""

from __future__ import annotations

import logging
from typing import Any

from qmp_shell.core.models import Command, QemuVersion, QmpEvent, SessionInfo
from qmp_shell.core.modes import ShellMode
from qmp_shell.core.protocols import Monitor
from qmp_shell.exceptions import QmpShellError, StartupError, TransportError

logger = logging.getLogger(__name__)


class ShellService:
    """Drives one monitor connection on behalf of the shell.

    Parameters
    ----------
    monitor:
        Any object satisfying the :class:`Monitor` protocol.
    mode:
        The shell flavour; decides how lines are wrapped and replies
        rendered.
    """

    def __init__(self, monitor: Monitor, mode: ShellMode) -> None:
        self._monitor: Monitor = monitor
        self._mode: ShellMode = mode
        self._events_since: int = 0

    @property
    def mode(self) -> ShellMode:
        return self._mode

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> SessionInfo:
        """Query the VM name, QEMU version and completion vocabulary.

        Raises
        ------
        StartupError
            If any of the startup queries fails.
        """
        try:
            name_reply = self._run(Command("query-name"))
            version_reply = self._run(Command("query-version"))
        except QmpShellError as exc:
            raise StartupError(f"cannot query the virtual machine: {exc}") from exc

        try:
            completions = self._mode.collect_completions(self._monitor)
        except Exception as exc:
            raise StartupError(f"cannot build the command list: {exc}") from exc

        info = SessionInfo(
            vm_name=self._parse_name(name_reply),
            version=self._parse_version(version_reply),
            completions=completions,
        )
        logger.debug(
            "connected to %r (QEMU %s), %d completion entries",
            info.vm_name, info.version, len(info.completions),
        )
        return info

    def execute(self, line: str) -> str:
        """Build a command from *line*, run it and render the reply.

        Raises
        ------
        CommandBuildError
            If *line* does not form a valid command.
        TransportError
            If the monitor fails or QEMU rejects the command.
        """
        command = self._mode.build_command(line)
        result = self._run(command)
        return self._mode.render_reply(command, result)

    def poll_events(self) -> list[QmpEvent]:
        """Return events received since the previous poll."""
        try:
            events = self._monitor.find_events(self._events_since)
        except QmpShellError:
            raise
        except Exception as exc:
            raise TransportError(f"Unexpected monitor error: {exc}") from exc
        for event in events:
            self._events_since = max(self._events_since, event.seconds + 1)
        return events

    # ------------------------------------------------------------------
    # Monitor delegation (safe boundary)
    # ------------------------------------------------------------------

    def _run(self, command: Command) -> Any:
        """Call the monitor and ensure only our exceptions escape."""
        try:
            return self._monitor.run(command)
        except QmpShellError:
            raise
        except Exception as exc:
            raise TransportError(f"Unexpected monitor error: {exc}") from exc

    # ------------------------------------------------------------------
    # Raw-reply → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_name(reply: Any) -> str:
        if not isinstance(reply, dict):
            return ""
        return str(reply.get("name") or "")

    @staticmethod
    def _parse_version(reply: Any) -> QemuVersion:
        qemu = reply.get("qemu") if isinstance(reply, dict) else None
        if not isinstance(qemu, dict):
            raise StartupError("query-version returned an unexpected reply")
        return QemuVersion(
            major=int(qemu.get("major", 0)),
            minor=int(qemu.get("minor", 0)),
            micro=int(qemu.get("micro", 0)),
        )
