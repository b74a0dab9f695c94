"""Completion vocabulary extracted from HMP help text.

The human monitor has no machine-readable command list, so the
vocabulary is scraped from two free-text reports:

* ``help`` — one line per command, e.g. ``c|cont  -- resume emulation``,
  with usage continuation lines starting with ``[`` or a tab.
* ``info`` — one line per status topic, e.g.
  ``info balloon  -- show balloon information``.

Every function here is pure; fetching the reports is the caller's job.
"""

from __future__ import annotations

from collections.abc import Iterator

from qmp_shell.core.completion import CompletionIndex

HELP_COMMAND: str = "help"
STATUS_COMMAND: str = "info"
LINE_SEPARATOR: str = "\r\n"

_CONTINUATION_MARKERS: tuple[str, ...] = ("[", "\t")


def _lines(text: str) -> Iterator[str]:
    yield from text.split(LINE_SEPARATOR)


def _pick_alias(name: str) -> str:
    """Pick the readable name of an ``a|alias`` pair.

    A one-letter first alias yields to the second; any longer first alias
    is kept as is, even when the second is longer still.
    """
    first, second = name.split("|", 1)
    second = second.split("|", 1)[0]
    return second if len(first) == 1 else first


def parse_command_list(text: str) -> list[str]:
    """Extract command and ``help <command>`` entries from ``help`` output."""
    entries: list[str] = []
    for line in _lines(text):
        if not line or line.startswith(_CONTINUATION_MARKERS):
            continue
        fields = line.split()
        if not fields:
            continue
        name = fields[0]
        if name == STATUS_COMMAND:
            continue
        if "|" in name:
            name = _pick_alias(name)
        entries.append(name)
        entries.append(f"{HELP_COMMAND} {name}")
    return entries


def parse_status_list(text: str) -> list[str]:
    """Extract ``info <topic>`` entries from ``info`` output.

    The topic is the second field when a line starts with the literal
    ``info`` prefix (``info balloon -- show balloon information``) and the
    first field otherwise (``balloon    Show balloon information``).
    Lines with fewer than two fields are skipped.
    """
    entries: list[str] = []
    for line in _lines(text):
        fields = line.split()
        if len(fields) < 2:
            continue
        topic = fields[1] if fields[0] == STATUS_COMMAND else fields[0]
        entries.append(f"{STATUS_COMMAND} {topic}")
    return entries


def introspect(command_list: str, status_list: str) -> CompletionIndex:
    """Merge both reports into one :class:`CompletionIndex`."""
    return CompletionIndex.from_entries(
        [*parse_command_list(command_list), *parse_status_list(status_list)],
    )
