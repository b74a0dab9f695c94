"""Interactive read-eval-print loop for qmp-shell.

One cycle: wait for a line, then either

* poll buffered QMP events (empty line), or
* build and run exactly one command and print its reply.

Errors from a single line are printed and the loop continues; only
Ctrl-C or Ctrl-D at the prompt ends the session.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import CompleteStyle

from qmp_shell.cli import exit_codes
from qmp_shell.cli.completer import IndexCompleter
from qmp_shell.cli.console import Sink, console, output, print_error
from qmp_shell.core.models import QmpEvent, SessionInfo
from qmp_shell.core.shell_service import ShellService
from qmp_shell.exceptions import QmpShellError

logger = logging.getLogger(__name__)


def format_event(event: QmpEvent) -> str:
    """Render one event the way the shell prints it."""
    return (
        f"Received QMP Event {event.type}: {json.dumps(event.data)}, "
        f"Timestamp: seconds = {event.seconds}, "
        f"microseconds = {event.microseconds}"
    )


class ShellREPL:
    """Prompt loop bound to one :class:`ShellService`.

    Parameters
    ----------
    service:
        Started service executing the commands.
    info:
        Session facts returned by :meth:`ShellService.start`.
    history_entries:
        Previously saved lines, oldest first.
    session:
        Prompt session to read from; built from prompt_toolkit when
        omitted.
    out, err:
        Sinks for results and for diagnostics.
    """

    def __init__(
        self,
        service: ShellService,
        info: SessionInfo,
        *,
        history_entries: Iterable[str] = (),
        session: Any | None = None,
        out: Sink = output,
        err: Sink = console,
    ) -> None:
        self.service = service
        self.info = info
        self.out = out
        self.err = err
        self.history = InMemoryHistory()
        for entry in history_entries:
            self.history.append_string(entry)
        self._session = session

    @property
    def prompt(self) -> str:
        return self.service.mode.prompt(self.info.vm_name)

    def _build_session(self) -> Any:
        return PromptSession(
            history=self.history,
            completer=IndexCompleter(self.info.completions),
            complete_style=CompleteStyle.READLINE_LIKE,
            complete_while_typing=False,
        )

    def run(self) -> int:
        """Print the banner and loop until the operator quits."""
        if self._session is None:
            self._session = self._build_session()

        self.out.print(self.service.mode.banner)
        self.out.print(f"Connected to QEMU {self.info.version}")
        self.out.print()

        while True:
            try:
                line = self._session.prompt(self.prompt)
            except KeyboardInterrupt:
                logger.info("Aborted")
                return exit_codes.SUCCESS
            except EOFError:
                self.out.print()
                return exit_codes.SUCCESS
            self.handle_line(line)

    def handle_line(self, line: str) -> None:
        """Run one cycle for an already read *line*."""
        try:
            if not line:
                for event in self.service.poll_events():
                    self.out.print(format_event(event))
                return
            self.out.print(self.service.execute(line))
        except QmpShellError as exc:
            print_error(exc, self.err)

    def history_strings(self) -> list[str]:
        """Return the current history, oldest first."""
        return list(self.history.get_strings())
