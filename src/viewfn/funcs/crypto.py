"""Digests over the UTF-8 text rendering of a value."""

from __future__ import annotations

import hashlib
from typing import Any

from viewfn.core.cast import to_text

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def _encode(value: Any) -> bytes:
    return to_text(value).encode("utf-8")


def fnv32a(value: Any) -> int:
    """32-bit FNV-1a hash as an unsigned integer (non-cryptographic)."""
    h = _FNV32_OFFSET
    for byte in _encode(value):
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def md5(value: Any) -> str:
    return hashlib.md5(_encode(value), usedforsecurity=False).hexdigest()


def sha1(value: Any) -> str:
    return hashlib.sha1(_encode(value), usedforsecurity=False).hexdigest()


def sha256(value: Any) -> str:
    return hashlib.sha256(_encode(value)).hexdigest()
