"""viewfn - value-manipulation functions for Jinja2 templates.

Templates get a table of namespaced helpers (``collections.Where``,
``strings.Truncate``, ``math.Add`` ...) plus short aliases (``where``,
``truncate``, ``add``) that coerce, compare and reshape loosely-typed data.
"""

from viewfn._version import __version__
from viewfn.config import ViewfnConfig
from viewfn.extensions import get_viewfn_jinja_env, render_string
from viewfn.registry import Entry, FunctionTable, build_table

__all__ = [
    "Entry",
    "FunctionTable",
    "ViewfnConfig",
    "__version__",
    "build_table",
    "get_viewfn_jinja_env",
    "render_string",
]
