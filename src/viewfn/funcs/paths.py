"""Slash-separated path manipulation.

These are purely lexical: nothing touches the filesystem, and the rules are
the same on every platform. Unlike ``posixpath.normpath``, a leading ``//``
collapses to ``/``.
"""

from __future__ import annotations

from typing import Any

from viewfn.core.cast import to_text


def clean(p: Any) -> str:
    """Shortest equivalent path.

    Repeated slashes collapse, ``.`` elements drop, ``..`` removes the
    preceding element (or is kept at the front of a relative path). An empty
    result is ``"."``.
    """
    text = to_text(p)
    if not text:
        return "."

    rooted = text.startswith("/")
    parts: list[str] = []
    for part in text.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(part)

    result = "/".join(parts)
    if rooted:
        result = "/" + result
    return result or "."


def split(p: Any) -> list[str]:
    """``[dir, file]`` split immediately after the final slash."""
    text = to_text(p)
    i = text.rfind("/")
    return [text[: i + 1], text[i + 1 :]]


def base(p: Any) -> str:
    text = to_text(p)
    if not text:
        return "."
    text = text.rstrip("/")
    if not text:
        return "/"
    return text[text.rfind("/") + 1 :]


def dir_(p: Any) -> str:
    return clean(split(p)[0])


def ext(p: Any) -> str:
    """Extension of the final element, including the dot; "" if none."""
    text = to_text(p)
    for i in range(len(text) - 1, -1, -1):
        if text[i] == "/":
            break
        if text[i] == ".":
            return text[i:]
    return ""


def base_name(p: Any) -> str:
    """Final element with its extension removed."""
    name = base(p)
    suffix = ext(name)
    return name[: len(name) - len(suffix)] if suffix else name


def join(*elements: Any) -> str:
    """Join non-empty elements with slashes and clean the result."""
    parts = [to_text(element) for element in elements]
    parts = [part for part in parts if part]
    if not parts:
        return ""
    return clean("/".join(parts))
