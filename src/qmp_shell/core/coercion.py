"""Type inference for command-line argument values.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic.

Decision order (first match wins, :func:`coerce`):

1. **Boolean** — ``true``/``false`` in any letter case.
2. **Structured** — text starting with ``{`` or ``[`` parsed as JSON.
3. **Integer** — ``-?[0-9]+`` within the signed 64-bit range.
4. **String** — everything else, verbatim.
"""

from __future__ import annotations

import json
import re

from qmp_shell.core.models import (
    BoolValue,
    IntegerValue,
    StringValue,
    StructuredValue,
    Value,
)
from qmp_shell.exceptions import InvalidStructuredValueError

INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

_INTEGER_RE = re.compile(r"-?[0-9]+")
_WRAPPING_QUOTES: str = "\"'"


def strip_quotes(raw: str) -> str:
    """Remove one layer of matching ASCII quotes wrapping *raw*."""
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in _WRAPPING_QUOTES:
        return raw[1:-1]
    return raw


def _parse_int64(raw: str) -> int | None:
    if _INTEGER_RE.fullmatch(raw) is None:
        return None
    number = int(raw)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def coerce(raw: str) -> Value:
    """Map an argument value to its typed representation.

    Raises
    ------
    InvalidStructuredValueError
        If *raw* starts with ``{`` or ``[`` but is not valid JSON.
    """
    lowered = raw.lower()
    if lowered == "true":
        return BoolValue(True)
    if lowered == "false":
        return BoolValue(False)

    if raw[:1] in ("{", "["):
        try:
            return StructuredValue(json.loads(raw))
        except json.JSONDecodeError as exc:
            raise InvalidStructuredValueError(raw, str(exc)) from exc

    number = _parse_int64(raw)
    if number is not None:
        return IntegerValue(number)

    return StringValue(raw)
