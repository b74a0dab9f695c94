"""Tests for the QMP/HMP strategy bundles (core/modes.py).

The monitor is mocked; these tests verify how each mode wraps lines,
renders replies and collects its completion vocabulary.
"""

from __future__ import annotations

from typing import Any

from qmp_shell.core.command_builder import HMP_PASSTHROUGH_COMMAND
from qmp_shell.core.models import Command, StringValue
from qmp_shell.core.modes import (
    LEGACY_TEXT,
    STRUCTURED,
    collect_hmp_commands,
    collect_qmp_commands,
    mode_for,
    render_structured,
    render_text,
)


class TestModeSelection:
    def test_flag_off_is_structured(self) -> None:
        assert mode_for(False) is STRUCTURED

    def test_flag_on_is_legacy_text(self) -> None:
        assert mode_for(True) is LEGACY_TEXT

    def test_prompts(self) -> None:
        assert STRUCTURED.prompt("vm0") == "qmp_shell/vm0> "
        assert LEGACY_TEXT.prompt("vm0") == "hmp_shell/vm0> "

    def test_history_files_differ(self) -> None:
        assert STRUCTURED.history_filename == ".qmpshell_history"
        assert LEGACY_TEXT.history_filename == ".hmpshell_history"


class TestBuildCommand:
    def test_structured_keeps_line(self) -> None:
        assert STRUCTURED.build_command("stop").name == "stop"

    def test_legacy_wraps_line(self) -> None:
        command = LEGACY_TEXT.build_command("info status")
        assert command.name == HMP_PASSTHROUGH_COMMAND
        assert command.arguments["command-line"] == StringValue("info status")


class TestRendering:
    def test_structured_is_indented_json(self) -> None:
        text = render_structured(Command("query-status"), {"running": True})
        assert text == '{\n    "running": true\n}'

    def test_structured_empty_return(self) -> None:
        assert render_structured(Command("stop"), {}) == "{}"

    def test_structured_passthrough_prints_raw_text(self) -> None:
        command = Command(HMP_PASSTHROUGH_COMMAND, {"command-line": StringValue("info")})
        assert render_structured(command, "VM status: running\r\n") == (
            "VM status: running\r\n"
        )

    def test_text_is_unmodified(self) -> None:
        command = LEGACY_TEXT.build_command("info status")
        assert render_text(command, "VM status: running\r\n") == "VM status: running\r\n"


class TestCollectCompletions:
    def test_qmp_uses_query_commands(
        self, make_monitor: Any, qmp_replies: dict[str, Any],
    ) -> None:
        index = collect_qmp_commands(make_monitor(qmp_replies))
        assert index.entries == ("cont", "query-block", "query-status", "stop")

    def test_qmp_skips_nameless_entries(self, make_monitor: Any) -> None:
        monitor = make_monitor({"query-commands": [{"name": "stop"}, {}, "junk"]})
        assert collect_qmp_commands(monitor).entries == ("stop",)

    def test_hmp_scrapes_help_and_info(self, make_monitor: Any) -> None:
        def _hmp(command: Command) -> str:
            line = command.arguments["command-line"]
            assert isinstance(line, StringValue)
            if line.value == "help":
                return "c|cont  -- resume emulation\r\ninfo [subcommand]\r\n"
            return "info status  -- show the current VM status\r\n"

        monitor = make_monitor({HMP_PASSTHROUGH_COMMAND: _hmp})
        index = collect_hmp_commands(monitor)
        assert index.entries == ("cont", "help cont", "info status")
        assert monitor.run.call_count == 2
