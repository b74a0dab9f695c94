"""Assemble a :class:`~qmp_shell.core.models.Command` from one input line.

Pipeline (enforced by :func:`build`):

1. **Pass through** — in legacy text mode the whole line becomes the
   ``command-line`` argument of ``human-monitor-command`` untouched, and
   the remaining steps are skipped.
2. **Tokenize** — split on whitespace, honouring quotes.
3. **Split arguments** — each token after the name must be ``key=value``.
4. **Coerce** — strip one quote layer from the value and type it.

Any failure raises a :class:`~qmp_shell.exceptions.CommandBuildError`
subclass; no partial command is ever returned.
"""

from __future__ import annotations

from qmp_shell.core import tokenizer
from qmp_shell.core.coercion import coerce, strip_quotes
from qmp_shell.core.models import Command, StringValue, Value
from qmp_shell.exceptions import EmptyCommandError, MalformedArgumentError

HMP_PASSTHROUGH_COMMAND: str = "human-monitor-command"
HMP_COMMAND_LINE_ARGUMENT: str = "command-line"


def build_legacy(line: str) -> Command:
    """Route *line* verbatim through the HMP pass-through command.

    The line is never re-tokenized, so any mix of quotes survives.
    """
    return Command(
        name=HMP_PASSTHROUGH_COMMAND,
        arguments={HMP_COMMAND_LINE_ARGUMENT: StringValue(line)},
    )


def parse_argument(token: str) -> tuple[str, Value]:
    """Split a ``key=value`` token and coerce its value.

    Raises
    ------
    MalformedArgumentError
        Unless the token splits into exactly two parts with a
        non-empty value part.
    InvalidStructuredValueError
        If the value looks like JSON but does not parse.
    """
    parts = tokenizer.split(token, "=")
    if len(parts) != 2 or not parts[1]:
        raise MalformedArgumentError(token)
    key, raw_value = parts
    return key, coerce(strip_quotes(raw_value))


def build(line: str, legacy_text_mode: bool = False) -> Command:
    """Build a command from *line*.

    Repeated argument keys keep the last value given.

    Raises
    ------
    EmptyCommandError
        If *line* holds no tokens.
    MalformedArgumentError
        If an argument is not a ``key=value`` pair.
    InvalidStructuredValueError
        If a JSON-looking value fails to parse.
    """
    if legacy_text_mode:
        return build_legacy(line)

    tokens = tokenizer.split(line, tokenizer.SPACE)
    if not tokens:
        raise EmptyCommandError()

    name, *argument_tokens = tokens
    arguments: dict[str, Value] = {}
    for token in argument_tokens:
        key, value = parse_argument(token)
        arguments[key] = value

    return Command(name=name, arguments=arguments)
