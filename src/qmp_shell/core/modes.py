"""Behaviour that differs between the QMP and HMP shells.

A :class:`ShellMode` bundles the three mode-specific strategies:

* how an input line becomes a :class:`~qmp_shell.core.models.Command`,
* how a reply is rendered for display,
* how the completion vocabulary is collected at startup,

plus the cosmetic strings (banner, prompt, history file name).  The two
module-level instances :data:`STRUCTURED` and :data:`LEGACY_TEXT` are
the only modes; :func:`mode_for` selects one from the CLI flag.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from qmp_shell.core import command_builder, introspection
from qmp_shell.core.completion import CompletionIndex
from qmp_shell.core.models import Command
from qmp_shell.core.protocols import Monitor


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------

def _build_structured(line: str) -> Command:
    return command_builder.build(line, legacy_text_mode=False)


def _build_legacy(line: str) -> Command:
    return command_builder.build(line, legacy_text_mode=True)


# ---------------------------------------------------------------------------
# Reply rendering
# ---------------------------------------------------------------------------

def render_structured(command: Command, result: Any) -> str:
    """Pretty-print a QMP reply as indented JSON.

    A pass-through HMP command typed by hand still prints its raw text.
    """
    if command.name == command_builder.HMP_PASSTHROUGH_COMMAND and isinstance(result, str):
        return result
    return json.dumps(result, indent=4)


def render_text(command: Command, result: Any) -> str:
    """Return the HMP reply text unmodified."""
    return result if isinstance(result, str) else str(result)


# ---------------------------------------------------------------------------
# Completion collection
# ---------------------------------------------------------------------------

def collect_qmp_commands(monitor: Monitor) -> CompletionIndex:
    """Build completions from the ``query-commands`` reply."""
    reply = monitor.run(Command("query-commands"))
    names = [
        str(entry["name"])
        for entry in reply or []
        if isinstance(entry, dict) and entry.get("name")
    ]
    return CompletionIndex.from_entries(names)


def collect_hmp_commands(monitor: Monitor) -> CompletionIndex:
    """Build completions by scraping the HMP ``help`` and ``info`` reports."""
    command_list = monitor.run(_build_legacy(introspection.HELP_COMMAND))
    status_list = monitor.run(_build_legacy(introspection.STATUS_COMMAND))
    return introspection.introspect(str(command_list), str(status_list))


# ---------------------------------------------------------------------------
# Mode descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ShellMode:
    """Strategy bundle for one shell flavour."""

    name: str
    banner: str
    prompt_label: str
    history_filename: str
    legacy_text: bool
    build_command: Callable[[str], Command]
    render_reply: Callable[[Command, Any], str]
    collect_completions: Callable[[Monitor], CompletionIndex]

    def prompt(self, vm_name: str) -> str:
        return f"{self.prompt_label}/{vm_name}> "


STRUCTURED = ShellMode(
    name="qmp",
    banner="Welcome to the QMP low-level shell",
    prompt_label="qmp_shell",
    history_filename=".qmpshell_history",
    legacy_text=False,
    build_command=_build_structured,
    render_reply=render_structured,
    collect_completions=collect_qmp_commands,
)

LEGACY_TEXT = ShellMode(
    name="hmp",
    banner="Welcome to the HMP low-level shell",
    prompt_label="hmp_shell",
    history_filename=".hmpshell_history",
    legacy_text=True,
    build_command=_build_legacy,
    render_reply=render_text,
    collect_completions=collect_hmp_commands,
)


def mode_for(legacy_text: bool) -> ShellMode:
    """Return :data:`LEGACY_TEXT` or :data:`STRUCTURED`."""
    return LEGACY_TEXT if legacy_text else STRUCTURED
