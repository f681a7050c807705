"""HTML-oriented text transforms.

Results are plain strings; marking output as safe is left to the host.
"""

from __future__ import annotations

import html
import re
from typing import Any

from viewfn.core.cast import to_text

_TAG_RE = re.compile(r"<[^>]*>")


def html_escape(s: Any) -> str:
    """Escape ``<``, ``>``, ``&``, ``'`` and ``"`` using numeric quote entities."""
    escaped = html.escape(to_text(s), quote=False)
    return escaped.replace("'", "&#39;").replace('"', "&#34;")


def html_unescape(s: Any) -> str:
    return html.unescape(to_text(s))


def markdownify(s: Any) -> str:
    """Minimal Markdown: blank lines separate ``<p>`` paragraphs."""
    return "<p>" + to_text(s).replace("\n\n", "</p><p>") + "</p>"


def plainify(s: Any) -> str:
    """Strip HTML tags."""
    return _TAG_RE.sub("", to_text(s))
