"""Stable swap error classes.

Quote and admin paths raise these; the curve math below them returns None
and leaves the choice of error to the caller.
"""

from __future__ import annotations


class SwapError(Exception):
    """Base error for stable swap operations."""

    kind = "swap_error"


class InvalidInput(SwapError):
    """An argument is outside the range the operation accepts."""

    kind = "invalid_input"


class EmptySupply(SwapError):
    """A pool cannot be initialized with an empty reserve."""

    kind = "empty_supply"


class EmptyPool(SwapError):
    """The pool has no LP token supply."""

    kind = "empty_pool"


class CalculationFailure(SwapError):
    """Curve or fee arithmetic overflowed, underflowed or divided by zero."""

    kind = "calculation_failure"

    def __init__(self, operation: str) -> None:
        super().__init__(f"Calculation failed during {operation}")
        self.operation = operation


class ExceededSlippage(SwapError):
    """The quoted amount is below the caller's minimum."""

    kind = "exceeded_slippage"

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Slippage exceeded: expected at least {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class RampLocked(SwapError):
    """A new ramp cannot start this soon after the previous one."""

    kind = "ramp_locked"


class InsufficientRampTime(SwapError):
    """The requested ramp is shorter than the minimum duration."""

    kind = "insufficient_ramp_time"
