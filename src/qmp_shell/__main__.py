"""Allow ``python -m qmp_shell`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m qmp_shell`` behaves identically to the ``qmp-shell``
console script.
"""

from __future__ import annotations

from qmp_shell.cli.app import cli

if __name__ == "__main__":
    cli()
