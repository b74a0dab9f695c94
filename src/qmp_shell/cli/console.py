"""CLI console helpers with optional Rich support.

Two sinks are exposed:

* :data:`console` — diagnostics, banners and errors on stderr, with Rich
  markup.
* :data:`output` — command results on stdout, written verbatim so that
  JSON brackets are never mistaken for markup.

This module avoids module-level imports of Rich so bootstrap paths
(``--help``, ``--version``) remain functional even when it is not
installed.
"""

from __future__ import annotations

import re
import sys
from typing import Any, Protocol

from qmp_shell.exceptions import EnvironmentError, QmpShellError

_MARKUP_RE = re.compile(r"\[/?[a-z ]+\]")


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr (default) or stdout."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


def escape(text: str) -> str:
	"""Escape *text* for inclusion in a Rich markup string."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		return text
	return rich_escape(text)


class Sink(Protocol):
	"""Anything the shell can print a line to."""

	def print(self, *objects: object) -> None:
		...  # pragma: no cover


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy for stderr with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			plain = [_MARKUP_RE.sub("", str(obj)) for obj in objects]
			print(*plain, file=sys.stderr)
			return
		rich_console.print(*objects)


class _OutputProxy:
	"""``print``-compatible proxy writing raw text to stdout."""

	def print(self, *objects: object) -> None:
		"""Write without markup or highlighting."""
		try:
			rich_console = get_rich_console(stderr=False)
		except EnvironmentError:
			print(*objects)
			return
		rich_console.out(*objects, highlight=False)


console = _ConsoleProxy()
output = _OutputProxy()


def print_error(exc: QmpShellError, sink: Sink | None = None) -> None:
	"""Render a domain error, plus its hint, on *sink* (default stderr)."""
	target = console if sink is None else sink
	target.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
	if exc.hint:
		target.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
