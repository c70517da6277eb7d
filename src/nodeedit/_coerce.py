"""Turn edited text back into a JSON value."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass

_NUMBER_RE = re.compile(
    r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$", re.ASCII
)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of a strict JSON parse: either a value or an error message."""

    ok: bool
    value: object = None
    error: str = ""


def _reject_constant(name: str) -> object:
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(literal: str) -> float:
    number = float(literal)
    if not math.isfinite(number):
        raise ValueError(f"number out of range: {literal}")
    return number


def parse_json_strict(text: str) -> ParseResult:
    """Parse text as standard JSON (NaN and Infinity are not accepted)."""
    try:
        value = json.loads(
            text, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError is a ValueError; deep nesting hits the recursion limit
        return ParseResult(False, error=str(exc))
    return ParseResult(True, value)


def parse_number(text: str) -> ParseResult:
    """Parse a finite decimal literal; integers stay ``int``."""
    match = _NUMBER_RE.match(text)
    if match is None:
        return ParseResult(False, error=f"not a number: {text!r}")
    literal = text.strip()
    try:
        if match.group(2) is None and "." not in literal:
            return ParseResult(True, int(literal))
        number = float(literal)
    except ValueError as exc:
        # int() refuses literals past sys.get_int_max_str_digits()
        return ParseResult(False, error=str(exc))
    if not math.isfinite(number):
        return ParseResult(False, error=f"number out of range: {text!r}")
    return ParseResult(True, number)


def coerce_value(text: str) -> object:
    """Best-effort conversion of edited text into a value.

    JSON first (objects, arrays, quoted strings, numbers, literals); when
    that fails the text is read as a bare scalar: ``true``/``false``, a
    number, or else the text itself as a string.
    """
    parsed = parse_json_strict(text)
    if parsed.ok:
        return parsed.value

    if text == "true":
        return True
    if text == "false":
        return False
    number = parse_number(text)
    if number.ok:
        return number.value
    return text
