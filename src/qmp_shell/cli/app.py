"""CLI application entry point and command routing for qmp-shell.

This module is the **process-level error boundary** for the entire
application.  It catches :class:`~qmp_shell.exceptions.QmpShellError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.
Per-line errors inside the interactive shell are handled one level
down, in :mod:`qmp_shell.cli.repl`.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from qmp_shell.cli import exit_codes
from qmp_shell.cli.console import console, escape, get_rich_console, output, print_error
from qmp_shell.config import ShellConfig
from qmp_shell.core.models import SessionInfo
from qmp_shell.core.shell_service import ShellService
from qmp_shell.exceptions import (
    EnvironmentError,
    HistoryError,
    QmpShellError,
    StartupError,
    TransportError,
)
from qmp_shell.infra.history import HistoryFile
from qmp_shell.infra.qmp_monitor import QmpMonitor
from qmp_shell.version import __version__

logger = logging.getLogger(__name__)

_PACKAGE_LOGGER: str = "qmp_shell"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``qmp-shell <socket>``     — QMP shell (structured commands)
    * ``qmp-shell -H <socket>``  — HMP shell (human monitor text)
    * ``qmp-shell --version``
    """
    parser = argparse.ArgumentParser(
        prog="qmp-shell",
        description="Low-level shell for the QEMU Machine Protocol.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-H",
        dest="hmp",
        action="store_true",
        help="run the HMP shell instead of QMP",
    )
    parser.add_argument(
        "socket",
        help="path of the QMP UNIX socket",
    )
    return parser


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def _load_rich_handler_class() -> type[Any]:
    """Return ``rich.logging.RichHandler`` or raise ``EnvironmentError``."""
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return RichHandler


def _configure_logging(debug: bool) -> None:
    """Attach a Rich stderr handler to the package logger (once)."""
    handler_class = _load_rich_handler_class()
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if any(isinstance(handler, handler_class) for handler in package_logger.handlers):
        return
    package_logger.addHandler(
        handler_class(
            console=get_rich_console(),
            show_time=False,
            show_path=False,
            markup=False,
        )
    )


# ---------------------------------------------------------------------------
# Session runners
# ---------------------------------------------------------------------------

def _connect(config: ShellConfig) -> QmpMonitor:
    """Open the monitor, mapping transport failures to ``StartupError``."""
    monitor = QmpMonitor(config.socket_path, timeout=config.timeout)
    try:
        monitor.connect()
    except TransportError as exc:
        raise StartupError(str(exc), hint=exc.hint) from exc
    return monitor


def _run_single(service: ShellService) -> int:
    """Read one line from stdin, execute it and print the reply."""
    line = sys.stdin.readline()
    if not line:
        raise QmpShellError("cannot read command from stdin: end of input")
    output.print(service.execute(line.rstrip("\r\n")))
    return exit_codes.SUCCESS


def _run_interactive(
    service: ShellService, info: SessionInfo, config: ShellConfig,
) -> int:
    """Run the REPL between loading and saving the history file."""
    from qmp_shell.cli.repl import ShellREPL

    history_file = HistoryFile(config.history_path)
    try:
        entries = history_file.load()
    except HistoryError as exc:
        logger.warning("%s", exc)
        entries = []

    repl = ShellREPL(service, info, history_entries=entries)
    code = repl.run()

    try:
        history_file.save(repl.history_strings())
    except HistoryError as exc:
        logger.warning("%s", exc)
    return code


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the qmp-shell CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = ShellConfig.from_args(args.socket, legacy_text=args.hmp)
    _configure_logging(config.debug)

    monitor = _connect(config)
    try:
        service = ShellService(monitor, config.mode)
        info = service.start()
        if not sys.stdin.isatty():
            return _run_single(service)
        return _run_interactive(service, info, config)
    finally:
        monitor.close()


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except QmpShellError as exc:
        print_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
