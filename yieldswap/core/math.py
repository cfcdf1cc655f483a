"""Pure integer arithmetic shared by the engines.

Every function is stateless and operates on plain Python ints, which never
overflow, so products of two 256-bit values are exact before the division.

Rounding is explicit: `//` on non-negative operands truncates toward zero,
which is the floor the ledgers rely on. Floats never appear.
"""

from __future__ import annotations

import math

from .errors import InvalidInput

# Domain constants
BPS_DENOM: int = 10_000
REWARD_SCALE: int = 10**18
MAX_AMOUNT: int = 2**256 - 1


def require_int(name: str, value: object) -> int:
    """Reject non-ints (including bool) with `InvalidInput`."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInput(f"{name} must be an int, got {type(value).__name__}")
    return value


def require_positive(name: str, value: object) -> int:
    """`value` must be an int in [1, MAX_AMOUNT]."""
    v = require_int(name, value)
    if v <= 0:
        raise InvalidInput(f"{name} must be positive: {v}")
    if v > MAX_AMOUNT:
        raise InvalidInput(f"{name} exceeds MAX_AMOUNT: {v}")
    return v


def require_non_negative(name: str, value: object) -> int:
    """`value` must be an int in [0, MAX_AMOUNT]."""
    v = require_int(name, value)
    if v < 0:
        raise InvalidInput(f"{name} must be non-negative: {v}")
    if v > MAX_AMOUNT:
        raise InvalidInput(f"{name} exceeds MAX_AMOUNT: {v}")
    return v


def isqrt_floor(n: int) -> int:
    """floor(sqrt(n)) computed exactly on integers."""
    if n < 0:
        raise ValueError(f"isqrt of negative value: {n}")
    return math.isqrt(n)


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) for non-negative operands."""
    if denominator <= 0:
        raise ZeroDivisionError("mul_div denominator must be positive")
    if a < 0 or b < 0:
        raise ValueError("mul_div operands must be non-negative")
    return (a * b) // denominator


def bps_of(amount: int, bps: int) -> int:
    """floor(amount * bps / 10_000)."""
    return mul_div(amount, bps, BPS_DENOM)
