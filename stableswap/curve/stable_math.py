"""Two-asset StableSwap invariant math.

Newton-Raphson solvers for the invariant D and for one reserve given the
other and D. Reserves are u64; intermediates run in the checked 256-bit
SafeInt, and any overflow, underflow or zero divisor makes the function
return None.

Both solvers stop when successive iterates differ by at most 1, or after
MAX_ITERATIONS. On exhaustion the last iterate is returned and a warning is
logged; the curve converges well within the cap for any legal reserves, so
exhaustion points at inputs worth investigating rather than a wrong answer.
"""

from __future__ import annotations

import structlog

from stableswap.constants import MAX_ITERATIONS, N_COINS
from stableswap.safe_int import S, SafeInt, SafeIntError

logger = structlog.get_logger()


def _compute_next_d(amp_factor: int, d_init: SafeInt, d_prod: SafeInt, sum_x: SafeInt) -> SafeInt:
    """One Newton step for D.

    d = (ann * S + d_p * n) * d / ((ann - 1) * d + (n + 1) * d_p)
    """
    ann = S((S(amp_factor) * N_COINS).to_u64())
    leverage = sum_x * ann
    numerator = d_init * (d_prod * N_COINS + leverage)
    denominator = d_init * (ann - 1) + d_prod * (N_COINS + 1)
    return numerator // denominator


def compute_d(amount_a: int, amount_b: int, amp_factor: int) -> int | None:
    """Calculate the StableSwap invariant D for two reserves.

    Algorithm:
        1. Initial guess: D = amount_a + amount_b
        2. d_p = D^3 / (4 * amount_a * amount_b), built one reserve at a time
        3. Newton step until |D_new - D_old| <= 1 or MAX_ITERATIONS

    Args:
        amount_a: Reserve of asset A
        amount_b: Reserve of asset B
        amp_factor: Effective amplification coefficient

    Returns:
        D, 0 for an empty pool, or None if the computation fails (including
        a pool where exactly one reserve is zero)
    """
    try:
        sum_x = S.from_u64((S(amount_a) + S(amount_b)).to_u64())
        if sum_x == 0:
            return 0

        amount_a_times_coins = S((S(amount_a) * N_COINS).to_u64())
        amount_b_times_coins = S((S(amount_b) * N_COINS).to_u64())

        d = sum_x
        for _ in range(MAX_ITERATIONS):
            d_prod = d
            d_prod = (d_prod * d) // amount_a_times_coins
            d_prod = (d_prod * d) // amount_b_times_coins
            d_prev = d
            d = _compute_next_d(amp_factor, d, d_prod, sum_x)
            if d.abs_diff(d_prev) <= 1:
                return d.value

        logger.warning(
            "stable_invariant_did_not_converge",
            amount_a=amount_a,
            amount_b=amount_b,
            amp_factor=amp_factor,
            iterations=MAX_ITERATIONS,
            d=d.value,
        )
        return d.value
    except SafeIntError:
        return None


def compute_y_raw(x: int, d: int, amp_factor: int) -> int | None:
    """Solve for the other reserve y given reserve x and invariant d.

    With sum' = prod' = x:
        c = D^3 / (n^2n * x * A)  (as D*D/(x*n) * D/(ann*n))
        b = x + D / ann
    then iterate y = (y^2 + c) / (2y + b - D) starting from y = D.

    Args:
        x: The known reserve
        d: Invariant to preserve
        amp_factor: Effective amplification coefficient

    Returns:
        y as an unbounded (u256) integer, or None if the computation fails
    """
    try:
        ann = S((S(amp_factor) * N_COINS).to_u64())
        x_times_coins = S((S(x) * N_COINS).to_u64())
        sd = S(d)

        c = (sd * sd) // x_times_coins
        c = (c * sd) // (ann * N_COINS)
        b = sd // ann + x

        y = sd
        for _ in range(MAX_ITERATIONS):
            y_prev = y
            y_numerator = y**2 + c
            y_denominator = y * 2 + b - sd
            y = y_numerator // y_denominator
            if y.abs_diff(y_prev) <= 1:
                return y.value

        logger.warning(
            "stable_y_did_not_converge",
            x=x,
            d=d,
            amp_factor=amp_factor,
            iterations=MAX_ITERATIONS,
            y=y.value,
        )
        return y.value
    except SafeIntError:
        return None


def compute_y(x: int, d: int, amp_factor: int) -> int | None:
    """compute_y_raw narrowed to u64."""
    y = compute_y_raw(x, d, amp_factor)
    if y is None:
        return None
    try:
        return S(y).to_u64()
    except SafeIntError:
        return None


def compute_output_for_input(
    amount_in: int,
    source_reserve: int,
    destination_reserve: int,
    amp_factor: int,
) -> int | None:
    """Raw (pre-fee) output of selling amount_in into the pool.

    Algorithm:
        1. D from the pre-trade reserves
        2. y such that D holds with source reserve + amount_in
        3. Return destination_reserve - y

    Args:
        amount_in: Amount of the source asset paid in
        source_reserve: Pool reserve of the source asset
        destination_reserve: Pool reserve of the destination asset
        amp_factor: Effective amplification coefficient

    Returns:
        The raw output amount, or None if any step fails
    """
    d = compute_d(source_reserve, destination_reserve, amp_factor)
    if d is None:
        return None
    try:
        new_source_reserve = (S(source_reserve) + S(amount_in)).to_u64()
    except SafeIntError:
        return None
    y = compute_y(new_source_reserve, d, amp_factor)
    if y is None:
        return None
    out = S(destination_reserve).checked_sub(y)
    return None if out is None else out.value
