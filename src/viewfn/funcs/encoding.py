"""Base64 and JSON encoding."""

from __future__ import annotations

import base64
import binascii
from typing import Any

import msgspec

from viewfn.core.cast import to_text
from viewfn.core.value import Outcome


def base64_encode(value: Any) -> str:
    return base64.b64encode(to_text(value).encode("utf-8")).decode("ascii")


def base64_decode(value: Any) -> Outcome:
    """Decode standard (padded) base64 text.

    Returns:
        Outcome with the decoded text, or the decoder's error message.
    """
    try:
        data = base64.b64decode(to_text(value), validate=True)
    except (binascii.Error, ValueError) as e:
        return Outcome.failure(e)
    return Outcome(data.decode("utf-8", errors="replace"))


def jsonify(value: Any) -> Outcome:
    """Encode a value as compact JSON with sorted mapping keys.

    Values msgspec cannot encode (arbitrary objects, non-string keys it does
    not support) produce a failed Outcome.
    """
    try:
        encoded = msgspec.json.encode(value, order="sorted")
    except (TypeError, ValueError, msgspec.EncodeError) as e:
        return Outcome.failure(e)
    return Outcome(encoded.decode("utf-8"))
