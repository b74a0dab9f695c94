"""Runtime configuration assembled from CLI arguments and the environment.

There are no configuration files; everything comes from the command
line plus two environment variables:

* ``HOME`` — directory holding the history files.
* ``QMP_SHELL_DEBUG`` — any non-empty value other than ``0`` enables
  debug logging of the QMP wire traffic.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from qmp_shell.core.modes import ShellMode, mode_for
from qmp_shell.infra.qmp_monitor import DEFAULT_TIMEOUT

HOME_ENV: str = "HOME"
DEBUG_ENV: str = "QMP_SHELL_DEBUG"


def history_path(mode: ShellMode, environ: Mapping[str, str]) -> Path:
    """Return the per-mode history file, or the null device without ``HOME``."""
    home = environ.get(HOME_ENV)
    if home is None:
        return Path(os.devnull)
    return Path(home) / mode.history_filename


def debug_enabled(environ: Mapping[str, str]) -> bool:
    return environ.get(DEBUG_ENV, "") not in ("", "0")


@dataclass(frozen=True, slots=True)
class ShellConfig:
    """Everything needed to start one shell session."""

    socket_path: str
    mode: ShellMode
    history_path: Path
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False

    @classmethod
    def from_args(
        cls,
        socket_path: str,
        *,
        legacy_text: bool,
        environ: Mapping[str, str] | None = None,
    ) -> ShellConfig:
        """Build a config from parsed CLI arguments and *environ*.

        *environ* defaults to :data:`os.environ`.
        """
        env = os.environ if environ is None else environ
        mode = mode_for(legacy_text)
        return cls(
            socket_path=socket_path,
            mode=mode,
            history_path=history_path(mode, env),
            debug=debug_enabled(env),
        )
