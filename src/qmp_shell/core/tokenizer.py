"""Quote-aware field splitting.

One routine serves both levels of command-line parsing: splitting a
line into a command name and argument tokens (on whitespace), and
splitting an argument token into key and value (on ``=``).

Quoting only suppresses the separator.  Quote characters are kept in
the resulting tokens; callers strip them where they need to.
"""

from __future__ import annotations

# Code points carrying the Unicode ``Quotation_Mark`` property.
QUOTATION_MARKS: frozenset[str] = frozenset(
    "\"'"
    "«»"
    "‘’‚‛“”„‟"
    "‹›"
    "⹂"
    "「」『』"
    "〝〞〟"
    "﹁﹂﹃﹄"
    "＂＇｢｣"
)

SPACE: str = " "


def _is_separator(char: str, separator: str) -> bool:
    if separator == SPACE:
        return char.isspace()
    return char == separator


def split(text: str, separator: str) -> list[str]:
    """Split *text* on *separator*, treating quoted spans as opaque.

    * Runs of separators never produce empty tokens.
    * A quotation mark opens a span that only the same code point
      closes; separators inside the span are ordinary data.
    * A span left open at the end of *text* ends with the input.
    * With ``separator=" "`` any whitespace character separates.

    >>> split('set_password protocol=vnc password="se cret"', " ")
    ['set_password', 'protocol=vnc', 'password="se cret"']
    """
    tokens: list[str] = []
    current: list[str] = []
    closing_quote: str | None = None

    for char in text:
        if closing_quote is not None:
            if char == closing_quote:
                closing_quote = None
            current.append(char)
            continue
        if char in QUOTATION_MARKS:
            closing_quote = char
            current.append(char)
            continue
        if _is_separator(char, separator):
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)

    if current:
        tokens.append("".join(current))
    return tokens
