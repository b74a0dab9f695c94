"""Prefix-completion vocabulary shared by both shell modes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CompletionIndex:
    """Immutable, sorted, de-duplicated set of completion strings.

    Entries keep their original case; :meth:`complete` lower-cases the
    partial input before matching.
    """

    entries: tuple[str, ...] = ()

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> CompletionIndex:
        """Build an index from any iterable, dropping duplicates."""
        return cls(entries=tuple(sorted(set(entries))))

    def complete(self, partial: str) -> list[str]:
        """Return every entry starting with the lower-cased *partial*."""
        prefix = partial.lower()
        return [entry for entry in self.entries if entry.startswith(prefix)]

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return len(self.entries) > 0

    def __contains__(self, entry: object) -> bool:
        return entry in self.entries
