"""qmp-shell — interactive shell for the QEMU Machine Protocol.

Turns free-text operator input into typed QMP commands, with a legacy
HMP text mode routed through ``human-monitor-command``.
"""

from qmp_shell.version import __version__

__all__: list[str] = ["__version__"]
