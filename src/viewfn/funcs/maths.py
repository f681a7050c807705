"""Arithmetic over values coerced with ``to_float``.

All results are floats except ``mod``, which works on integers.
"""

from __future__ import annotations

import math
import random
from typing import Any

from viewfn.core.cast import to_float, to_int


def abs_(n: Any) -> float:
    return abs(to_float(n))


def add(*args: Any) -> float:
    result = 0.0
    for arg in args:
        result += to_float(arg)
    return result


def sub(*args: Any) -> float:
    if not args:
        return 0.0
    result = to_float(args[0])
    for arg in args[1:]:
        result -= to_float(arg)
    return result


def mul(*args: Any) -> float:
    if not args:
        return 0.0
    result = to_float(args[0])
    for arg in args[1:]:
        result *= to_float(arg)
    return result


def div(*args: Any) -> float:
    """Divide the first argument by each following one; zero divisors are skipped."""
    if not args:
        return 0.0
    result = to_float(args[0])
    for arg in args[1:]:
        divisor = to_float(arg)
        if divisor != 0:
            result /= divisor
    return result


def mod(a: Any, b: Any) -> int:
    """Integer remainder truncated toward zero (sign follows the dividend)."""
    x, y = to_int(a), to_int(b)
    if y == 0:
        return 0
    remainder = abs(x) % abs(y)
    return -remainder if x < 0 else remainder


def max_(*args: Any) -> float:
    if not args:
        return 0.0
    return max(to_float(arg) for arg in args)


def min_(*args: Any) -> float:
    if not args:
        return 0.0
    return min(to_float(arg) for arg in args)


def ceil(n: Any) -> float:
    x = to_float(n)
    return float(math.ceil(x)) if math.isfinite(x) else x


def floor(n: Any) -> float:
    x = to_float(n)
    return float(math.floor(x)) if math.isfinite(x) else x


def round_(n: Any) -> float:
    """Round to the nearest integer, halves away from zero."""
    x = to_float(n)
    if not math.isfinite(x):
        return x
    whole = math.trunc(x)
    if abs(x - whole) >= 0.5:
        whole += 1 if x > 0 else -1
    return float(whole)


def sqrt(n: Any) -> float:
    x = to_float(n)
    if x < 0 or math.isnan(x):
        return math.nan
    return math.sqrt(x)


def pow_(x: Any, y: Any) -> float:
    base, exponent = to_float(x), to_float(y)
    try:
        return math.pow(base, exponent)
    except OverflowError:
        odd = exponent.is_integer() and exponent % 2 == 1
        return -math.inf if base < 0 and odd else math.inf
    except ValueError:
        # zero to a negative power, or a negative base with a fractional exponent
        return math.inf if base == 0 else math.nan


def pi() -> float:
    return math.pi


def rand(rng: random.Random | None = None) -> float:
    """Pseudo-random float in [0.0, 1.0) drawn from ``rng``."""
    source = rng if rng is not None else random.Random()
    return source.random()
