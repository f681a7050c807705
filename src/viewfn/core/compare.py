"""Ordering and equality over arbitrary template values.

There is a single ordering rule, used by sorting predicates, range filters
and the gt/ge/lt/le helpers: operands that both look numeric compare as
numbers, everything else compares as text by code point.
"""

from __future__ import annotations

from typing import Any

from .cast import looks_numeric, to_float, to_text
from .value import Kind, is_empty, is_truthy, kind_of

_MISSING: Any = object()


def equal(a: Any, b: Any) -> bool:
    """Structural deep equality.

    Kinds must match, so ``1`` never equals ``"1"`` or ``True``. Sequences
    and mappings are equal when they have the same length and equal
    elements / key-value pairs.
    """
    kind = kind_of(a)
    if kind is not kind_of(b):
        return False

    if kind is Kind.UNSET:
        return True
    if kind is Kind.TEXT:
        return to_text(a) == to_text(b)
    if kind is Kind.SEQUENCE:
        if len(a) != len(b):
            return False
        return all(equal(x, y) for x, y in zip(a, b))
    if kind is Kind.MAPPING:
        if len(a) != len(b):
            return False
        # hashing folds 1, 1.0 and True together, so keys are paired by equal()
        other_keys = list(b)
        for key, item in a.items():
            match = next((k for k in other_keys if equal(key, k)), _MISSING)
            if match is _MISSING:
                return False
            try:
                other = b[match]
            except (TypeError, KeyError):
                return False
            if not equal(item, other):
                return False
        return True

    try:
        return bool(a == b)
    except Exception:
        return a is b


def compare(a: Any, b: Any) -> int:
    """Three-way comparison returning -1, 0 or 1."""
    if looks_numeric(a) and looks_numeric(b):
        if kind_of(a) is Kind.NUMBER and kind_of(b) is Kind.NUMBER:
            # exact for ints too large for a float
            try:
                return int(a > b) - int(a < b)
            except (TypeError, ArithmeticError):
                pass
        x, y = to_float(a), to_float(b)
        return int(x > y) - int(x < y)

    s, t = to_text(a), to_text(b)
    return int(s > t) - int(s < t)


def ne(a: Any, b: Any) -> bool:
    return not equal(a, b)


def gt(a: Any, b: Any) -> bool:
    return compare(a, b) > 0


def ge(a: Any, b: Any) -> bool:
    return compare(a, b) >= 0


def lt(a: Any, b: Any) -> bool:
    return compare(a, b) < 0


def le(a: Any, b: Any) -> bool:
    return compare(a, b) <= 0


def conditional(cond: Any, a: Any, b: Any) -> Any:
    """Select ``a`` when ``cond`` is truthy, else ``b``.

    Both branches are already evaluated; this only picks one.
    """
    return a if is_truthy(cond) else b


def default(fallback: Any, given: Any = None) -> Any:
    """Return ``fallback`` when ``given`` is unset or empty.

    Empty means: Unset, "", an empty sequence or mapping, or False.
    Numeric zero is kept.
    """
    if is_empty(given):
        return fallback
    return given
