#!/usr/bin/env python3
"""Fuzz the single-asset withdrawal against its pool-safety properties.

The withdrawal charges an imbalance fee on a hypothetical balanced
withdrawal and then re-solves the curve, so its behavior at extreme
amplification and near-total drains is checked empirically rather than
assumed. For random pools and burn sizes this script checks that:

- the payout never takes the whole base reserve
- remaining LP tokens are not diluted: D after the withdrawal per
  remaining share is at least D before per share
- burning more LP tokens never pays less
- the trade fee is never negative (the checked subtraction fails the
  calculation instead, and failures are counted and reported)

Usage:
    python scripts/fuzz_withdraw_one.py [--iterations N] [--seed S] [--verbose]

Exit codes:
    0 - No property violations
    1 - At least one violation (details logged)
"""

import argparse
import logging
import random
import sys
from dataclasses import dataclass

import structlog

from stableswap.constants import MAX_AMP, MIN_AMP
from stableswap.curve.amp import AmpState
from stableswap.curve.stable_swap import StableSwap
from stableswap.fees import Fees

logger = structlog.get_logger()

FEE_DENOMINATOR = 10_000
MAX_RESERVE = 10**15


@dataclass
class FuzzStats:
    """Counters for one fuzz run."""

    cases: int = 0
    failed_calculations: int = 0
    violations: int = 0


def random_fees(rng: random.Random) -> Fees:
    """Trade and withdraw fees up to 1%, admin share up to 100%."""
    return Fees(
        admin_trade_fee_numerator=rng.randint(0, FEE_DENOMINATOR),
        admin_trade_fee_denominator=FEE_DENOMINATOR,
        admin_withdraw_fee_numerator=rng.randint(0, FEE_DENOMINATOR),
        admin_withdraw_fee_denominator=FEE_DENOMINATOR,
        trade_fee_numerator=rng.randint(0, 100),
        trade_fee_denominator=FEE_DENOMINATOR,
        withdraw_fee_numerator=rng.randint(0, 100),
        withdraw_fee_denominator=FEE_DENOMINATOR,
    )


def random_amp(rng: random.Random) -> int:
    """Log-uniform over the allowed range so both extremes get coverage."""
    exponent = rng.uniform(0, 6)
    return max(MIN_AMP, min(MAX_AMP, int(10**exponent)))


def random_share(rng: random.Random, supply: int) -> int:
    """Mostly small burns, with explicit edge cases."""
    choice = rng.random()
    if choice < 0.1:
        return supply
    if choice < 0.2:
        return max(1, supply - rng.randint(1, 1_000))
    if choice < 0.3:
        return rng.randint(1, 1_000)
    return rng.randint(1, supply)


def check_case(
    stats: FuzzStats,
    invariant: StableSwap,
    share: int,
    supply: int,
    base: int,
    quote: int,
    fees: Fees,
) -> None:
    """Run one withdrawal and record any property violation."""
    stats.cases += 1
    context = {
        "amp": invariant.amp_factor,
        "share": share,
        "supply": supply,
        "base": base,
        "quote": quote,
    }
    result = invariant.compute_withdraw_one(share, supply, base, quote, fees)
    if result is None:
        stats.failed_calculations += 1
        logger.debug("withdraw_one_failed", **context)
        return
    dy, _ = result

    if dy >= base:
        stats.violations += 1
        logger.error("base_reserve_drained", dy=dy, **context)
        return

    if share < supply:
        d_before = invariant.compute_d(base, quote)
        d_after = invariant.compute_d(base - dy, quote)
        if d_before is not None and d_after is not None:
            if d_after * supply < d_before * (supply - share):
                stats.violations += 1
                logger.error(
                    "remaining_shares_diluted",
                    d_before=d_before,
                    d_after=d_after,
                    dy=dy,
                    **context,
                )

    if share > 1:
        smaller = invariant.compute_withdraw_one(share - 1, supply, base, quote, fees)
        if smaller is not None and smaller[0] > dy:
            stats.violations += 1
            logger.error("payout_not_monotonic", dy=dy, smaller_dy=smaller[0], **context)


def run(iterations: int, seed: int) -> FuzzStats:
    rng = random.Random(seed)
    stats = FuzzStats()
    for _ in range(iterations):
        base = rng.randint(1, MAX_RESERVE)
        # Imbalance up to 1000:1 in either direction
        quote = max(1, min(MAX_RESERVE, base * rng.randint(1, 1_000) // rng.randint(1, 1_000)))
        invariant = StableSwap(AmpState.fixed(random_amp(rng)), 0)
        supply = invariant.compute_d(base, quote)
        if not supply:
            stats.failed_calculations += 1
            continue
        check_case(
            stats,
            invariant,
            random_share(rng, supply),
            supply,
            base,
            quote,
            random_fees(rng),
        )
    return stats


def main() -> int:
    parser = argparse.ArgumentParser(description="Fuzz single-asset withdrawals")
    parser.add_argument("--iterations", "-n", type=int, default=10_000)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    stats = run(args.iterations, args.seed)
    logger.info(
        "fuzz_complete",
        seed=args.seed,
        cases=stats.cases,
        failed_calculations=stats.failed_calculations,
        violations=stats.violations,
    )
    return 1 if stats.violations else 0


if __name__ == "__main__":
    sys.exit(main())
