"""Infrastructure: persisted command history.

The history file is plain text, one entry per line, oldest first.  A
missing file is an empty history.

Rules
-----
* No ``print()`` — callers decide how to report failures.
* Every ``OSError`` is re-raised as :class:`HistoryError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from qmp_shell.exceptions import HistoryError

DEFAULT_LIMIT: int = 1000


class HistoryFile:
    """File-backed history list capped at *limit* entries."""

    def __init__(self, path: Path, *, limit: int = DEFAULT_LIMIT) -> None:
        self.path: Path = path
        self.limit: int = max(1, limit)

    def load(self) -> list[str]:
        """Return stored entries, or ``[]`` when the file does not exist.

        Raises
        ------
        HistoryError
            When the file exists but cannot be read.
        """
        try:
            data = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as exc:
            raise HistoryError(f"reading history file: {exc}") from exc
        entries = [line for line in data.splitlines() if line.strip()]
        return entries[-self.limit:]

    def save(self, entries: Iterable[str]) -> None:
        """Overwrite the file with the newest *limit* entries.

        Raises
        ------
        HistoryError
            When the file cannot be written.
        """
        kept = [entry for entry in entries if entry.strip()][-self.limit:]
        text = "".join(f"{entry}\n" for entry in kept)
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise HistoryError(f"writing history file: {exc}") from exc
