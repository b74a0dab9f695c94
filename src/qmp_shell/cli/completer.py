"""prompt_toolkit completer backed by a :class:`CompletionIndex`."""

from __future__ import annotations

from collections.abc import Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from qmp_shell.core.completion import CompletionIndex


class IndexCompleter(Completer):
    """Complete the whole line typed so far against the index.

    Entries may contain spaces (``help cont``, ``info balloon``), so the
    match covers everything before the cursor rather than the last word.
    """

    def __init__(self, index: CompletionIndex) -> None:
        self.index = index

    def get_completions(
        self, document: Document, complete_event: CompleteEvent,
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        for entry in self.index.complete(text):
            yield Completion(entry, start_position=-len(text))
