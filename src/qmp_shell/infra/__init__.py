"""Infrastructure layer — external system integration.

This layer wraps all interaction with the QMP socket and the
filesystem.  Every raw ``OSError`` or decoding exception must be caught
here and re-raised as a :class:`~qmp_shell.exceptions.QmpShellError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from qmp_shell.infra.history import HistoryFile
from qmp_shell.infra.qmp_monitor import DEFAULT_TIMEOUT, QmpMonitor

__all__: list[str] = [
    "DEFAULT_TIMEOUT",
    "HistoryFile",
    "QmpMonitor",
]
