"""Overflow-safe scaled multiply-divide.

Both functions compute floor(value * numerator / denominator) with the
product held in a checked 256-bit intermediate, then narrow to u64. They
return None instead of raising, so callers can chain them and fail the
whole computation on the first missing result.

mul_div_imbalanced has the same arithmetic as mul_div. It is kept as a
separate name because fee amounts (trade, withdraw and the admin skims) must
always go through it; the general form is reserved for the normalized fee
and the curve.
"""

from __future__ import annotations

from stableswap.safe_int import S, SafeIntError

__all__ = ["mul_div", "mul_div_imbalanced"]


def _scaled_mul_div(value: int, numerator: int, denominator: int) -> int | None:
    try:
        return ((S(value) * S(numerator)) // S(denominator)).to_u64()
    except SafeIntError:
        return None


def mul_div(value: int, numerator: int, denominator: int) -> int | None:
    """Compute floor(value * numerator / denominator) as a u64.

    Args:
        value: Amount to scale
        numerator: Scale numerator
        denominator: Scale denominator

    Returns:
        The scaled amount, or None if denominator is zero or the result
        does not fit in u64
    """
    return _scaled_mul_div(value, numerator, denominator)


def mul_div_imbalanced(value: int, numerator: int, denominator: int) -> int | None:
    """Fee-path variant of mul_div with identical rounding (floor)."""
    return _scaled_mul_div(value, numerator, denominator)
