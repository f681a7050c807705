"""Text helpers.

Every argument is rendered with ``to_text`` and counts with ``to_int``, so
numbers and Unset can be passed anywhere a string is expected. Lengths and
positions are in characters (code points), not bytes.
"""

from __future__ import annotations

import itertools
import logging
import re
from typing import Any

from viewfn.core.cast import to_int, to_text

log = logging.getLogger(__name__)

DEFAULT_TRUNCATE_SUFFIX = "…"

# $$, ${name} or $name in a replacement template
_TEMPLATE_GROUP_RE = re.compile(r"\$(?:\$|\{(\w+)\}|(\w+))")


def _compile(pattern: Any) -> re.Pattern[str] | None:
    try:
        return re.compile(to_text(pattern))
    except re.error as e:
        log.debug("invalid regular expression %r: %s", pattern, e)
        return None


def chomp(s: Any) -> str:
    """Strip trailing newlines and carriage returns."""
    return to_text(s).rstrip("\r\n")


def contains(s: Any, substr: Any) -> bool:
    return to_text(substr) in to_text(s)


def contains_any(s: Any, chars: Any) -> bool:
    text = to_text(s)
    return any(ch in text for ch in to_text(chars))


def contains_non_space(s: Any) -> bool:
    return any(not ch.isspace() for ch in to_text(s))


def count(s: Any, substr: Any) -> int:
    """Non-overlapping occurrences of ``substr``."""
    return to_text(s).count(to_text(substr))


def count_runes(s: Any) -> int:
    """Number of characters, not counting whitespace."""
    return sum(1 for ch in to_text(s) if not ch.isspace())


def count_words(s: Any) -> int:
    return len(to_text(s).split())


def rune_count(s: Any) -> int:
    return len(to_text(s))


def find_re(pattern: Any, s: Any, limit: Any = -1) -> list[str]:
    """All matches of ``pattern`` in ``s``, at most ``limit`` when it is >= 0.

    An invalid pattern yields an empty list.
    """
    regex = _compile(pattern)
    if regex is None:
        return []
    matches = (m.group(0) for m in regex.finditer(to_text(s)))
    n = to_int(limit)
    if n >= 0:
        matches = itertools.islice(matches, n)
    return list(matches)


def _expand(template: str, match: re.Match[str]) -> str:
    def group(ref: re.Match[str]) -> str:
        if ref.group(0) == "$$":
            return "$"
        name = ref.group(1) or ref.group(2)
        try:
            value = match.group(int(name) if name.isdigit() else name)
        except IndexError:
            return ""
        return value or ""

    return _TEMPLATE_GROUP_RE.sub(group, template)


def replace_re(pattern: Any, repl: Any, s: Any) -> str:
    """Replace every match of ``pattern`` in ``s``.

    ``repl`` may refer to groups as ``$1``, ``${1}``, ``$name`` or
    ``${name}``; ``$$`` is a literal dollar. Unknown groups expand to "".
    An invalid pattern returns ``s`` unchanged.
    """
    text = to_text(s)
    regex = _compile(pattern)
    if regex is None:
        return text
    template = to_text(repl)
    return regex.sub(lambda m: _expand(template, m), text)


def first_upper(s: Any) -> str:
    text = to_text(s)
    return text[:1].upper() + text[1:]


def has_prefix(s: Any, prefix: Any) -> bool:
    return to_text(s).startswith(to_text(prefix))


def has_suffix(s: Any, suffix: Any) -> bool:
    return to_text(s).endswith(to_text(suffix))


def repeat(s: Any, n: Any) -> str:
    return to_text(s) * max(0, to_int(n))


def replace(s: Any, old: Any, new: Any, limit: Any = -1) -> str:
    """Replace ``old`` with ``new``; only the first ``limit`` when it is >= 0."""
    n = to_int(limit)
    return to_text(s).replace(to_text(old), to_text(new), n if n >= 0 else -1)


def slice_string(s: Any, start: Any, end: Any = None) -> str:
    """Characters in [start, end), clamped to the string."""
    text = to_text(s)
    lo = max(0, to_int(start))
    hi = len(text) if end is None else min(len(text), to_int(end))
    if lo > hi:
        return ""
    return text[lo:hi]


def substr(s: Any, start: Any, length: Any = None) -> str:
    """``length`` characters from ``start``; a negative start counts from the end."""
    text = to_text(s)
    size = len(text)
    begin = to_int(start)
    if begin < 0:
        begin = max(0, size + begin)
    if begin >= size:
        return ""

    end = size
    if length is not None and to_int(length) >= 0:
        end = min(size, begin + to_int(length))
    return text[begin:end]


def split(s: Any, sep: Any) -> list[str]:
    """Split around every ``sep``; an empty separator splits into characters."""
    text, separator = to_text(s), to_text(sep)
    if not separator:
        return list(text)
    return text.split(separator)


def _is_word_separator(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def title(s: Any) -> str:
    """Uppercase the first letter of each word, leaving the rest untouched.

    "hello wORLD" becomes "Hello WORLD".
    """
    result: list[str] = []
    previous = " "
    for ch in to_text(s):
        if _is_word_separator(previous):
            upper = ch.title()
            result.append(upper if len(upper) == 1 else ch)
        else:
            result.append(ch)
        previous = ch
    return "".join(result)


def to_lower(s: Any) -> str:
    return to_text(s).lower()


def to_upper(s: Any) -> str:
    return to_text(s).upper()


def trim(s: Any, cutset: Any) -> str:
    return to_text(s).strip(to_text(cutset))


def trim_left(s: Any, cutset: Any) -> str:
    return to_text(s).lstrip(to_text(cutset))


def trim_right(s: Any, cutset: Any) -> str:
    return to_text(s).rstrip(to_text(cutset))


def trim_prefix(s: Any, prefix: Any) -> str:
    return to_text(s).removeprefix(to_text(prefix))


def trim_suffix(s: Any, suffix: Any) -> str:
    return to_text(s).removesuffix(to_text(suffix))


def trim_space(s: Any) -> str:
    return to_text(s).strip()


def truncate(
    s: Any,
    limit: Any,
    suffix: Any = None,
    *,
    default_suffix: str = DEFAULT_TRUNCATE_SUFFIX,
) -> str:
    """Shorten ``s`` to at most ``limit`` characters, breaking at a space.

    The suffix counts toward the limit. Text that already fits is returned
    unchanged.
    """
    text = to_text(s)
    size = to_int(limit)
    if len(text) <= size:
        return text

    tail = default_suffix if suffix is None else to_text(suffix)
    cut = text[: max(0, size - len(tail))]
    space = cut.rfind(" ")
    if space > 0:
        cut = cut[:space]
    return cut + tail
