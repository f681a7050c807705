"""Collection algebra for template data.

Every operation accepts sequences and mappings (a mapping contributes its
values in insertion order) and returns a new container; inputs are never
modified. Any other input kind degrades through ``neutral()``: Unset comes
back unchanged, everything else becomes an empty list or False.

Membership, deduplication and set operations use structural ``equal`` rather
than hashing, so unhashable elements (dicts, lists) work like any other.
"""

from __future__ import annotations

import logging
import math
import random
from functools import partial
from typing import Any, Callable
from urllib.parse import urlencode

from .cast import is_int_text, to_float, to_int, to_text
from .compare import equal, ge, gt, le, lt, ne
from .value import Fallback, Kind, items_of, kind_of, neutral

log = logging.getLogger(__name__)

# Upper bound on the length of a generated progression
SEQ_LIMIT = 2000

_MISSING: Any = object()


def _clamp(count: Any, length: int) -> int:
    return max(0, min(to_int(count), length))


def _as_index(key: Any) -> int | None:
    """Integer position for a sequence lookup, or None if the key is not integral."""
    kind = kind_of(key)
    if kind is Kind.NUMBER:
        if isinstance(key, int) or math.isfinite(to_float(key)):
            return to_int(key)
        return None
    if kind is Kind.TEXT:
        text = to_text(key).strip()
        if is_int_text(text):
            try:
                return int(text)
            except ValueError:
                # too many digits to convert, so past the end of any sequence
                return None
    return None


def _contains(items: list[Any], value: Any) -> bool:
    return any(equal(item, value) for item in items)


def _dedupe(items: list[Any]) -> list[Any]:
    result: list[Any] = []
    for item in items:
        if not _contains(result, item):
            result.append(item)
    return result


def _project(item: Any, field: Any) -> Any:
    """Resolve a dotted field path against an element; "." is the element itself."""
    path = to_text(field)
    if path == ".":
        return item

    current = item
    for part in path.split("."):
        kind = kind_of(current)
        if kind is Kind.MAPPING:
            try:
                current = current.get(part)
            except TypeError:
                return None
        elif kind is Kind.SEQUENCE:
            index = _as_index(part)
            if index is None or not 0 <= index < len(current):
                return None
            current = current[index]
        elif kind is Kind.OBJECT and part and not part.startswith("_"):
            try:
                current = getattr(current, part, None)
            except Exception:
                # a raising property reads as missing, like an absent key
                return None
        else:
            return None
        if current is None:
            return None
    return current


# =============================================================================
# Selection
# =============================================================================


def first(limit: Any, seq: Any) -> Any:
    """The first ``limit`` elements, ``limit`` clamped to [0, len]."""
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)
    return items[: _clamp(limit, len(items))]


def last(limit: Any, seq: Any) -> Any:
    """The last ``limit`` elements, ``limit`` clamped to [0, len]."""
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)
    return items[len(items) - _clamp(limit, len(items)) :]


def after(index: Any, seq: Any) -> Any:
    """Elements strictly after position ``index``.

    ``index == -1`` returns everything, so ``first(k) + after(k - 1)``
    rebuilds the sequence for every k in [0, len]. Any other out-of-range
    index returns an empty list.
    """
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)
    position = to_int(index)
    if position < -1 or position >= len(items):
        return []
    return items[position + 1 :]


def reverse(seq: Any) -> Any:
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)
    return items[::-1]


def sort(seq: Any, key: Any = None, order: Any = "asc") -> Any:
    """Stable sort by the text rendering of each element.

    Ordering is by code point of ``to_text`` only, never numeric, so
    ``[10, 2]`` stays ``[10, 2]``. ``key`` projects a field first (same
    paths as ``where``); ``order="desc"`` reverses and keeps ties stable.
    """
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)

    if key is None or to_text(key) in ("", "."):
        sort_key: Callable[[Any], str] = to_text
    else:
        sort_key = lambda item: to_text(_project(item, key))  # noqa: E731

    descending = to_text(order).strip().lower() == "desc"
    return sorted(items, key=sort_key, reverse=descending)


def shuffle(seq: Any, rng: random.Random | None = None) -> Any:
    """Fisher-Yates permutation drawing from ``rng``.

    Without an explicit generator a private one is created for the call, so
    concurrent renders never share random state.
    """
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)

    source = rng if rng is not None else random.Random()
    for i in range(len(items) - 1, 0, -1):
        j = source.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


# =============================================================================
# Set operations
# =============================================================================


def uniq(seq: Any) -> Any:
    """First occurrence of each distinct element, in original order."""
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)
    return _dedupe(items)


def union(a: Any, b: Any) -> Any:
    """``uniq(a)`` followed by the elements of ``b`` not seen yet."""
    left, right = items_of(a), items_of(b)
    if left is None and right is None:
        return neutral(Fallback.SEQUENCE, a)

    result = _dedupe(left or [])
    for item in right or []:
        if not _contains(result, item):
            result.append(item)
    return result


def intersect(a: Any, b: Any) -> Any:
    """Elements of ``a`` also present in ``b``, deduplicated, in ``a``'s order."""
    left, right = items_of(a), items_of(b)
    if left is None:
        return neutral(Fallback.SEQUENCE, a)
    if right is None:
        return neutral(Fallback.SEQUENCE, b)

    result: list[Any] = []
    for item in left:
        if _contains(right, item) and not _contains(result, item):
            result.append(item)
    return result


def complement(*seqs: Any) -> Any:
    """Elements of the last operand that appear in none of the others."""
    if len(seqs) < 2:
        return []

    *others, universe = seqs
    items = items_of(universe)
    if items is None:
        return neutral(Fallback.SEQUENCE, universe)

    excluded: list[Any] = []
    for other in others:
        excluded.extend(items_of(other) or [])
    return [item for item in items if not _contains(excluded, item)]


# =============================================================================
# Construction
# =============================================================================


def merge(*maps: Any) -> dict[Any, Any]:
    """Shallow merge; later mappings win. Non-mappings are skipped."""
    result: dict[Any, Any] = {}
    for mapping in maps:
        if kind_of(mapping) is Kind.MAPPING:
            result.update(mapping.items())
    return result


def dictionary(*values: Any, **named: Any) -> dict[str, Any]:
    """Build a mapping from alternating key/value arguments.

    Keys are rendered as text; a trailing key without a value is dropped.
    Keyword arguments are added after the positional pairs.
    """
    result = {to_text(key): value for key, value in zip(values[0::2], values[1::2])}
    result.update(named)
    return result


def seq(*args: Any) -> list[int]:
    """Inclusive integer progression.

    seq(n)                  1, 2, ..., n
    seq(start, stop)        start, ..., stop (step 1)
    seq(start, stop, step)  direction follows the sign of step
    """
    bounds = [to_int(arg) for arg in args]
    if len(bounds) == 1:
        start, stop, step = 1, bounds[0], 1
    elif len(bounds) == 2:
        start, stop, step = bounds[0], bounds[1], 1
    elif len(bounds) == 3:
        start, stop, step = bounds
    else:
        log.debug("seq: expected 1-3 arguments, got %d", len(bounds))
        return []

    if step == 0:
        return []

    if step > 0:
        count = (stop - start) // step + 1 if stop >= start else 0
        end = stop + 1
    else:
        count = (start - stop) // -step + 1 if start >= stop else 0
        end = stop - 1

    if count > SEQ_LIMIT:
        log.debug("seq: %d elements exceeds limit of %d", count, SEQ_LIMIT)
        return []
    return list(range(start, end, step))


def slice_(*args: Any) -> list[Any]:
    return list(args)


def append(seq: Any, *values: Any) -> Any:
    """A new list with ``values`` added after the elements of ``seq``."""
    kind = kind_of(seq)
    if kind is Kind.UNSET:
        return list(values)
    if kind is not Kind.SEQUENCE:
        return neutral(Fallback.SEQUENCE, seq)
    return [*seq, *values]


# =============================================================================
# Lookup
# =============================================================================


def index(container: Any, *path: Any) -> Any:
    """Walk successive keys / positions; a miss at any step gives Unset.

    A single list argument is used as the whole path.
    """
    if len(path) == 1 and kind_of(path[0]) is Kind.SEQUENCE:
        path = tuple(path[0])

    current = container
    for key in path:
        kind = kind_of(current)
        if kind is Kind.MAPPING:
            try:
                if key not in current:
                    return None
                current = current[key]
            except TypeError:
                return None
        elif kind is Kind.SEQUENCE:
            position = _as_index(key)
            if position is None or not 0 <= position < len(current):
                return None
            current = current[position]
        else:
            return None
    return current


def is_set(container: Any, key: Any) -> bool:
    """Whether ``key`` is present in a mapping or is a valid sequence position."""
    kind = kind_of(container)
    if kind is Kind.MAPPING:
        try:
            return key in container
        except TypeError:
            return False
    if kind is Kind.SEQUENCE:
        position = _as_index(key)
        return position is not None and 0 <= position < len(container)
    return neutral(Fallback.FALSE)


def in_(container: Any, value: Any) -> bool:
    """Membership: element of a sequence, key of a mapping, or substring of text."""
    kind = kind_of(container)
    if kind is Kind.SEQUENCE:
        return _contains(list(container), value)
    if kind is Kind.MAPPING:
        try:
            return value in container
        except TypeError:
            return False
    if kind is Kind.TEXT:
        return to_text(value) in to_text(container)
    return neutral(Fallback.FALSE)


# =============================================================================
# Filtering and mapping
# =============================================================================

_WHERE_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": equal,
    "=": equal,
    "==": equal,
    "ne": ne,
    "!=": ne,
    "<>": ne,
    "lt": lt,
    "<": lt,
    "le": le,
    "<=": le,
    "gt": gt,
    ">": gt,
    "ge": ge,
    ">=": ge,
    "in": lambda field, value: in_(value, field),
    "not in": lambda field, value: not in_(value, field),
}

_ORDERING_OPERATORS = frozenset({"lt", "<", "le", "<=", "gt", ">", "ge", ">="})


def where(seq: Any, field: Any, operator: Any = "eq", value: Any = _MISSING) -> Any:
    """Keep elements whose ``field`` satisfies ``operator`` against ``value``.

    Called with three arguments the third is the value and the operator is
    ``eq``. Ordering operators skip elements where the field is missing.

    Example:
        where([{"k": 1}, {"k": 2}, {"k": 3}], "k", "gt", 1)
        -> [{"k": 2}, {"k": 3}]
    """
    if value is _MISSING:
        operator, value = "eq", operator

    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)

    op_name = " ".join(to_text(operator).lower().split())
    test = _WHERE_OPERATORS.get(op_name)
    if test is None:
        log.debug("where: unknown operator %r", operator)
        return []

    result = []
    for item in items:
        projected = _project(item, field)
        if projected is None and op_name in _ORDERING_OPERATORS:
            continue
        if test(projected, value):
            result.append(item)
    return result


def _is_dot(arg: Any) -> bool:
    return isinstance(arg, str) and arg == "."


def apply(table: Any, seq: Any, name: Any, *args: Any) -> Any:
    """Call the function registered as ``name`` once per element.

    ``"."`` arguments are replaced by the element; without one the element is
    passed as the last argument. Only functions found through
    ``table.get(name)`` can be called.
    """
    items = items_of(seq)
    if items is None:
        return neutral(Fallback.SEQUENCE, seq)

    func = table.get(to_text(name)) if table is not None else None
    if func is None:
        log.debug("apply: no function named %r", name)
        return []
    if func is apply or (isinstance(func, partial) and func.func is apply):
        log.debug("apply: refusing to apply %r recursively", name)
        return []

    has_dot = any(_is_dot(arg) for arg in args)
    result = []
    for item in items:
        call_args = [item if _is_dot(arg) else arg for arg in args]
        if not has_dot:
            call_args.append(item)
        result.append(func(*call_args))
    return result


# =============================================================================
# Rendering
# =============================================================================


def delimit(seq: Any, sep: Any, last: Any = None) -> str:
    """Join element texts with ``sep``, using ``last`` before the final one."""
    items = items_of(seq)
    if items is None:
        return to_text(seq)

    texts = [to_text(item) for item in items]
    if len(texts) < 2:
        return "".join(texts)

    separator = to_text(sep)
    final = separator if last is None else to_text(last)
    return separator.join(texts[:-1]) + final + texts[-1]


def querify(*params: Any) -> str:
    """URL query string from alternating key/value arguments.

    A single mapping, or a single flat list of pairs, is also accepted.
    Keys are sorted; spaces encode as ``+``.
    """
    if len(params) == 1:
        only = params[0]
        kind = kind_of(only)
        if kind is Kind.MAPPING:
            pairs = list(only.items())
        elif kind is Kind.SEQUENCE:
            pairs = list(zip(only[0::2], only[1::2]))
        else:
            pairs = []
    else:
        pairs = list(zip(params[0::2], params[1::2]))

    encoded = sorted(((to_text(k), to_text(v)) for k, v in pairs), key=lambda p: p[0])
    return urlencode(encoded)
