"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — shell ended normally or the single command succeeded."""

GENERAL_ERROR: int = 1
"""A known QmpShellError was caught. User-facing message was displayed."""

USAGE_ERROR: int = 2
"""Wrong command-line usage (argparse convention)."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C outside the prompt.  POSIX convention (128 + SIGINT=2)."""
