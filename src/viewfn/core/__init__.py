"""viewfn core - dynamic value operations for template data.

Submodules: ``value`` (kinds, neutral results, Outcome), ``cast``
(coercion), ``compare`` (ordering and equality) and ``collections``
(collection algebra).
"""

from viewfn.core.cast import looks_numeric, to_float, to_int, to_text
from viewfn.core.compare import conditional, default, equal
from viewfn.core.value import Fallback, Kind, Outcome, kind_of, neutral

__all__ = [
    "Fallback",
    "Kind",
    "Outcome",
    "conditional",
    "default",
    "equal",
    "kind_of",
    "looks_numeric",
    "neutral",
    "to_float",
    "to_int",
    "to_text",
]
