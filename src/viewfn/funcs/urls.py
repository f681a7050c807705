"""URL building and slug helpers."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

from viewfn.core.cast import to_text
from viewfn.core.value import Outcome
from viewfn.funcs import paths

DEFAULT_BASE_URL = "http://localhost"

_ABSOLUTE_PREFIXES = ("http://", "https://")
_SLUG_RE = re.compile(r"[^a-z0-9]+")
_ORIGIN_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://[^/]*")


def _slug(s: Any) -> str:
    return _SLUG_RE.sub("-", to_text(s).lower()).strip("-")


def abs_url(s: Any, *, base_url: str = DEFAULT_BASE_URL) -> str:
    """Absolute URL for ``s``; http(s) URLs are returned unchanged."""
    text = to_text(s)
    if text.startswith(_ABSOLUTE_PREFIXES):
        return text
    return base_url.rstrip("/") + "/" + text.lstrip("/")


def rel_url(s: Any) -> str:
    """Root-relative URL: the path of an http(s) URL, or ``s`` with a leading slash."""
    text = to_text(s)
    if text.startswith(_ABSOLUTE_PREFIXES):
        try:
            return urlsplit(text).path
        except ValueError:
            return text
    if not text.startswith("/"):
        return "/" + text
    return text


def anchorize(s: Any) -> str:
    """Lowercase slug usable as an HTML id: runs of other characters become "-"."""
    return _slug(s)


def urlize(s: Any) -> str:
    return _slug(s)


def join_path(*elements: Any) -> str:
    """Join URL path elements, keeping a leading ``scheme://host`` intact."""
    parts = [to_text(element) for element in elements]
    if not parts:
        return ""

    origin = _ORIGIN_RE.match(parts[0])
    if origin is None:
        return paths.join(*parts)

    rest = [parts[0][origin.end() :], *parts[1:]]
    path = paths.join("/", *rest)
    return origin.group(0) + ("" if path == "/" else path)


def parse(s: Any) -> Outcome:
    """Split a URL into scheme, netloc, path, query and fragment.

    Returns:
        Outcome holding a ``urllib.parse.SplitResult``, or the parser's error.
    """
    try:
        return Outcome(urlsplit(to_text(s)))
    except ValueError as e:
        return Outcome.failure(e)
