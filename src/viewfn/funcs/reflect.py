from __future__ import annotations

from typing import Any

from viewfn.core.value import Kind, kind_of


def is_map(value: Any) -> bool:
    return kind_of(value) is Kind.MAPPING


def is_slice(value: Any) -> bool:
    return kind_of(value) is Kind.SEQUENCE
