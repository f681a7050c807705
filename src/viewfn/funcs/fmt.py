"""Print-style formatting helpers."""

from __future__ import annotations

import logging
import re
from typing import Any

from viewfn.core.cast import to_text

log = logging.getLogger(__name__)

# %% or one conversion: flags, width, precision, verb
_DIRECTIVE_RE = re.compile(r"%%|%([-+ #0]*\d*(?:\.\d+)?)([a-zA-Z])")

# Verbs without a direct %-format counterpart render as %s
_TEXT_VERBS = {"v", "t", "q"}


def _python_format(fmt: str) -> str:
    def convert(match: re.Match[str]) -> str:
        if match.group(0) == "%%":
            return "%%"
        flags, verb = match.group(1), match.group(2)
        if verb in _TEXT_VERBS:
            return f"%{flags}s"
        return match.group(0)

    return _DIRECTIVE_RE.sub(convert, fmt)


def print_(*args: Any) -> str:
    """Concatenate arguments, with a space between two adjacent non-text operands."""
    parts: list[str] = []
    for i, arg in enumerate(args):
        if i > 0 and not isinstance(arg, str) and not isinstance(args[i - 1], str):
            parts.append(" ")
        parts.append(to_text(arg))
    return "".join(parts)


def printf(fmt: Any, *args: Any) -> str:
    """printf-style formatting (``%s``, ``%d``, ``%05.2f`` ...).

    A format that does not fit its arguments renders the format text as-is.
    """
    template = _python_format(to_text(fmt))
    try:
        return template % args
    except (TypeError, ValueError, KeyError) as e:
        log.debug("printf: %r does not fit %d argument(s): %s", fmt, len(args), e)
        return to_text(fmt)


def println(*args: Any) -> str:
    """Space-separated arguments followed by a newline."""
    return " ".join(to_text(arg) for arg in args) + "\n"
