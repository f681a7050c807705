"""Coercion between scalar representations.

All three conversions are total. Templates have no good way to recover from
an exception mid-render, so a value that cannot be converted becomes 0 or ""
instead of raising.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any

from .value import Kind, kind_of

# Standard decimal float syntax: no padding, no digit separators
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_INT_RE = re.compile(r"[+-]?[0-9]+")


def _parse_float(text: str) -> float | None:
    if not _FLOAT_RE.fullmatch(text):
        return None
    number = float(text)
    # digits past the float range overflow to inf; only the literal spells it
    if math.isinf(number) and "inf" not in text.lower():
        return None
    return number


def is_int_text(text: str) -> bool:
    """True when ``text`` is plain integer syntax: an optional sign and ASCII digits."""
    return _INT_RE.fullmatch(text) is not None


def to_float(value: Any) -> float:
    """Convert a value to float; 0.0 when it is not a number or numeric text."""
    kind = kind_of(value)
    if kind is Kind.NUMBER:
        try:
            number = float(value)
        except (ArithmeticError, ValueError):
            return 0.0
        # Decimal converts an out-of-range finite value to inf instead of raising
        if math.isinf(number) and isinstance(value, Decimal) and value.is_finite():
            return 0.0
        return number
    if kind is Kind.TEXT:
        parsed = _parse_float(to_text(value))
        return 0.0 if parsed is None else parsed
    return 0.0


def to_int(value: Any) -> int:
    """Convert a value to int, truncating toward zero; 0 on failure."""
    kind = kind_of(value)
    if kind is Kind.NUMBER:
        if isinstance(value, int):
            return int(value)
        # NaN and infinities raise here, signalling Decimal NaN too
        try:
            return int(math.trunc(value))
        except (ArithmeticError, ValueError, TypeError):
            return 0
    if kind is Kind.TEXT:
        text = to_text(value)
        if is_int_text(text):
            # past sys.get_int_max_str_digits() int() refuses the text
            try:
                return int(text)
            except ValueError:
                return 0
    return 0


def to_text(value: Any) -> str:
    """Render a value as text.

    Text passes through, bytes decode as UTF-8, Unset becomes "" and
    everything else uses ``str()``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if value is None:
        return ""
    try:
        return str(value)
    except Exception:
        # str() on foreign objects can fail; fall back to the type's repr
        return object.__repr__(value)


def looks_numeric(value: Any) -> bool:
    """True for numbers and for text that parses as a float."""
    kind = kind_of(value)
    if kind is Kind.NUMBER:
        return True
    if kind is Kind.TEXT:
        return _parse_float(to_text(value)) is not None
    return False
