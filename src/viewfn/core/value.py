"""Runtime value model for template data.

Template data arrives as plain Python objects whose shape is only known at
call time. Every core operation dispatches on a single discriminator,
``kind_of(value)``, instead of scattering isinstance checks, and every
degraded result comes from ``neutral()`` so the fallback rules live in one
place.

Kinds:
    UNSET      None
    BOOLEAN    bool
    NUMBER     any numbers.Number that is not a bool or complex (Decimal included)
    TEXT       str, bytes, bytearray
    TIMESTAMP  datetime.date / datetime.datetime
    SEQUENCE   list, tuple
    MAPPING    any collections.abc.Mapping
    OBJECT     everything else (record-like objects, read by attribute)
"""

from __future__ import annotations

import datetime
import numbers
from collections.abc import Mapping
from enum import Enum
from typing import Any, NamedTuple


class Kind(str, Enum):
    UNSET = "unset"
    BOOLEAN = "boolean"
    NUMBER = "number"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OBJECT = "object"


SCALAR_KINDS = frozenset({Kind.BOOLEAN, Kind.NUMBER, Kind.TEXT, Kind.TIMESTAMP})
COLLECTION_KINDS = frozenset({Kind.SEQUENCE, Kind.MAPPING})


def kind_of(value: Any) -> Kind:
    """Classify a value. Never raises."""
    if value is None:
        return Kind.UNSET
    # bool is a numbers.Real subclass, so it has to be checked first
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, numbers.Real):
        return Kind.NUMBER
    # Decimal registers as a Number but not as Real
    if isinstance(value, numbers.Number) and not isinstance(value, numbers.Complex):
        return Kind.NUMBER
    if isinstance(value, (str, bytes, bytearray)):
        return Kind.TEXT
    if isinstance(value, datetime.date):
        return Kind.TIMESTAMP
    if isinstance(value, (list, tuple)):
        return Kind.SEQUENCE
    if isinstance(value, Mapping):
        return Kind.MAPPING
    return Kind.OBJECT


def is_collection(value: Any) -> bool:
    return kind_of(value) in COLLECTION_KINDS


def items_of(value: Any) -> list[Any] | None:
    """Elements of a collection as a new list, or None for other kinds.

    A mapping contributes its values in insertion order.
    """
    kind = kind_of(value)
    if kind is Kind.SEQUENCE:
        return list(value)
    if kind is Kind.MAPPING:
        return list(value.values())
    return None


class Fallback(str, Enum):
    """Neutral result families used when an operation meets the wrong kind."""

    ZERO = "zero"
    TEXT = "text"
    FALSE = "false"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


_NOTHING: Any = object()


def neutral(fallback: Fallback, given: Any = _NOTHING) -> Any:
    """Return the documented neutral value for an unsupported input.

    Args:
        fallback: Result family of the calling operation.
        given: The offending input, if any. For container results an Unset
            input is handed back unchanged instead of becoming empty.

    Returns:
        0, "", False, a fresh empty list / dict, or None (Unset passthrough).
    """
    if fallback is Fallback.ZERO:
        return 0
    if fallback is Fallback.TEXT:
        return ""
    if fallback is Fallback.FALSE:
        return False
    if given is None:
        return None
    if fallback is Fallback.MAPPING:
        return {}
    return []


def is_empty(value: Any) -> bool:
    """Emptiness as used by ``default``.

    Only Unset, text, containers and booleans participate; numeric zero is
    a real value.
    """
    kind = kind_of(value)
    if kind is Kind.UNSET:
        return True
    if kind is Kind.BOOLEAN:
        return not value
    if kind in (Kind.TEXT, Kind.SEQUENCE, Kind.MAPPING):
        return len(value) == 0
    return False


def is_truthy(value: Any) -> bool:
    kind = kind_of(value)
    if kind is Kind.UNSET:
        return False
    if kind is Kind.BOOLEAN:
        return value
    if kind is Kind.NUMBER:
        return value != 0
    if kind in (Kind.TEXT, Kind.SEQUENCE, Kind.MAPPING):
        return len(value) > 0
    return True


class Outcome(NamedTuple):
    """Two-part result of a fallible operation.

    Exactly one of ``value`` / ``error`` is meaningful: when ``error`` is set
    the operation failed and ``value`` is None.
    """

    value: Any
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: Any = None) -> Any:
        """Value on success, ``default`` on failure"""
        return self.value if self.ok else default

    @classmethod
    def failure(cls, error: Any) -> "Outcome":
        return cls(None, str(error) or error.__class__.__name__)
