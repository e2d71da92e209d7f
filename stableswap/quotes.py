"""Quotes for pool operations.

Each function prices one operation against a reserve snapshot and returns
the amounts to move plus the reserves the caller should record afterwards.
Applying the quote (transfers, mints, burns) and persisting the result is
the caller's job.

Zero input amounts are no-ops and return None. Arithmetic failures raise
CalculationFailure; amounts below the caller's minimum raise
ExceededSlippage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from stableswap.config import DEFAULT_AMP_POLICY, AmpPolicy
from stableswap.constants import U64_MAX
from stableswap.curve.amp import AmpState
from stableswap.curve.stable_swap import StableSwap, SwapResult
from stableswap.errors import (
    CalculationFailure,
    EmptyPool,
    EmptySupply,
    ExceededSlippage,
    InvalidInput,
)
from stableswap.pool_converter import quote_withdraw_amounts
from stableswap.safe_int import S, SafeIntError
from stableswap.state import PoolConfig, ReserveSnapshot

logger = structlog.get_logger()


class Token(str, Enum):
    """One side of the pool."""

    A = "a"
    B = "b"

    @property
    def other(self) -> Token:
        return Token.B if self is Token.A else Token.A


class SwapDirection(str, Enum):
    """Which asset is paid in."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"

    @property
    def source(self) -> Token:
        return Token.A if self is SwapDirection.A_TO_B else Token.B


@dataclass(frozen=True)
class InitializeQuote:
    """Bootstrap of a new pool."""

    amp: AmpState
    mint_amount: int
    reserves: ReserveSnapshot


@dataclass(frozen=True)
class SwapQuote:
    """A priced swap and the reserves after it."""

    direction: SwapDirection
    amount_in: int
    result: SwapResult
    new_reserves: ReserveSnapshot


@dataclass(frozen=True)
class DepositQuote:
    """LP tokens minted for a deposit and the reserves after it."""

    mint_amount: int
    new_reserves: ReserveSnapshot


@dataclass(frozen=True)
class WithdrawAmounts:
    """Per-asset outcome of a proportional withdrawal.

    Attributes:
        amount: Paid to the user
        fee: Trade and withdraw fees charged on this asset
        admin_fee: Part of fee paid to the admin account
    """

    amount: int
    fee: int
    admin_fee: int


@dataclass(frozen=True)
class WithdrawQuote:
    """A priced proportional withdrawal and the reserves after it."""

    pool_token_amount: int
    token_a: WithdrawAmounts
    token_b: WithdrawAmounts
    new_reserves: ReserveSnapshot


@dataclass(frozen=True)
class WithdrawOneQuote:
    """A priced single-asset withdrawal and the reserves after it.

    Attributes:
        base: Asset withdrawn
        pool_token_amount: LP tokens burned
        amount: Paid to the user
        trade_fee: Imbalance fee charged on the base asset
        withdraw_fee: Withdraw fee charged on the base asset
        admin_fee: Admin skim of both fees
        new_reserves: Reserves after the withdrawal
    """

    base: Token
    pool_token_amount: int
    amount: int
    trade_fee: int
    withdraw_fee: int
    admin_fee: int
    new_reserves: ReserveSnapshot


def _reserve(reserves: ReserveSnapshot, token: Token) -> int:
    return reserves.reserve_a if token is Token.A else reserves.reserve_b


def _with_reserve(
    reserves: ReserveSnapshot, token: Token, amount: int, supply: int | None = None
) -> ReserveSnapshot:
    new_supply = reserves.pool_token_supply if supply is None else supply
    if token is Token.A:
        return ReserveSnapshot(amount, reserves.reserve_b, new_supply)
    return ReserveSnapshot(reserves.reserve_a, amount, new_supply)


def _fail(operation: str, **context: object) -> CalculationFailure:
    logger.warning("calculation_failed", operation=operation, **context)
    return CalculationFailure(operation)


def _check_slippage(minimum: int, actual: int) -> None:
    if actual < minimum:
        logger.warning("slippage_exceeded", expected=minimum, actual=actual)
        raise ExceededSlippage(expected=minimum, actual=actual)


def quote_initialize(
    amp_factor: int,
    reserve_a: int,
    reserve_b: int,
    policy: AmpPolicy | None = None,
) -> InitializeQuote:
    """Amplification state and bootstrap LP mint for a new pool.

    The first liquidity provider receives exactly D of the initial
    reserves; there is no prior ratio, so no imbalance fee applies.

    Raises:
        InvalidInput: If amp_factor is outside the policy bounds
        EmptySupply: If either reserve is zero
        CalculationFailure: If D cannot be computed or exceeds u64
    """
    policy = policy or DEFAULT_AMP_POLICY
    if not policy.contains(amp_factor):
        raise InvalidInput(f"Invalid amp factor: {amp_factor}")
    if reserve_a == 0 or reserve_b == 0:
        raise EmptySupply("Initial reserves must be non-zero")

    amp = AmpState.fixed(amp_factor)
    mint_amount = StableSwap(amp, amp.start_ramp_ts).compute_d(reserve_a, reserve_b)
    if mint_amount is None or mint_amount > U64_MAX:
        raise _fail("initialize", reserve_a=reserve_a, reserve_b=reserve_b, amp=amp_factor)

    logger.info(
        "pool_initialized",
        amp=amp_factor,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        mint_amount=mint_amount,
    )
    return InitializeQuote(
        amp=amp,
        mint_amount=mint_amount,
        reserves=ReserveSnapshot(reserve_a, reserve_b, mint_amount),
    )


def quote_swap(
    config: PoolConfig,
    reserves: ReserveSnapshot,
    now: int,
    amount_in: int,
    minimum_amount_out: int,
    direction: SwapDirection,
) -> SwapQuote | None:
    """Price a swap.

    Raises:
        CalculationFailure: If the curve or fee arithmetic fails
        ExceededSlippage: If amount_swapped < minimum_amount_out
    """
    if amount_in == 0:
        return None

    source = direction.source
    destination = source.other
    invariant = StableSwap(config.amp, now)
    result = invariant.swap_to(
        amount_in,
        _reserve(reserves, source),
        _reserve(reserves, destination),
        config.fees,
    )
    if result is None:
        raise _fail("swap", amount_in=amount_in, direction=direction.value)
    _check_slippage(minimum_amount_out, result.amount_swapped)

    new_reserves = _with_reserve(reserves, source, result.new_source_amount)
    new_reserves = _with_reserve(new_reserves, destination, result.new_destination_amount)

    logger.debug(
        "swap_quoted",
        direction=direction.value,
        amount_in=amount_in,
        amount_swapped=result.amount_swapped,
        fee=result.fee,
        admin_fee=result.admin_fee,
        ts=now,
    )
    return SwapQuote(
        direction=direction,
        amount_in=amount_in,
        result=result,
        new_reserves=new_reserves,
    )


def quote_deposit(
    config: PoolConfig,
    reserves: ReserveSnapshot,
    now: int,
    amount_a: int,
    amount_b: int,
    min_mint_amount: int,
) -> DepositQuote | None:
    """Price a two-asset deposit.

    Raises:
        EmptyPool: If the pool has no LP supply (use quote_initialize)
        CalculationFailure: If the deposit does not grow D or arithmetic fails
        ExceededSlippage: If the mint amount < min_mint_amount
    """
    if amount_a == 0 and amount_b == 0:
        return None
    if reserves.pool_token_supply == 0:
        raise EmptyPool("Cannot deposit into a pool with no LP supply")

    invariant = StableSwap(config.amp, now)
    mint_amount = invariant.compute_mint_amount_for_deposit(
        amount_a,
        amount_b,
        reserves.reserve_a,
        reserves.reserve_b,
        reserves.pool_token_supply,
        config.fees,
    )
    if mint_amount is None:
        raise _fail("deposit", amount_a=amount_a, amount_b=amount_b)
    _check_slippage(min_mint_amount, mint_amount)

    try:
        new_reserves = ReserveSnapshot(
            (S(reserves.reserve_a) + amount_a).to_u64(),
            (S(reserves.reserve_b) + amount_b).to_u64(),
            (S(reserves.pool_token_supply) + mint_amount).to_u64(),
        )
    except SafeIntError:
        raise _fail("deposit", amount_a=amount_a, amount_b=amount_b) from None

    logger.debug(
        "deposit_quoted",
        amount_a=amount_a,
        amount_b=amount_b,
        mint_amount=mint_amount,
        ts=now,
    )
    return DepositQuote(mint_amount=mint_amount, new_reserves=new_reserves)


def quote_withdraw(
    config: PoolConfig,
    reserves: ReserveSnapshot,
    pool_token_amount: int,
    minimum_token_a_amount: int,
    minimum_token_b_amount: int,
) -> WithdrawQuote | None:
    """Price a proportional withdrawal of both assets.

    Does not depend on the amplification coefficient, so no timestamp is
    needed.

    Raises:
        EmptyPool: If the pool has no LP supply
        InvalidInput: If pool_token_amount exceeds the supply
        CalculationFailure: If fee arithmetic fails
        ExceededSlippage: If either asset is below its minimum
    """
    if pool_token_amount == 0:
        return None
    if reserves.pool_token_supply == 0:
        raise EmptyPool("Cannot withdraw from a pool with no LP supply")
    if pool_token_amount > reserves.pool_token_supply:
        raise InvalidInput(
            f"Cannot burn {pool_token_amount} of {reserves.pool_token_supply} LP tokens"
        )

    rates = quote_withdraw_amounts(
        pool_token_amount,
        reserves.pool_token_supply,
        reserves.reserve_a,
        reserves.reserve_b,
        config.fees,
    )
    if rates is None:
        raise _fail("withdraw", pool_token_amount=pool_token_amount)
    token_a, token_b = (WithdrawAmounts(*rate) for rate in rates)
    _check_slippage(minimum_token_a_amount, token_a.amount)
    _check_slippage(minimum_token_b_amount, token_b.amount)

    try:
        new_reserves = ReserveSnapshot(
            (S(reserves.reserve_a) - token_a.amount - token_a.admin_fee).value,
            (S(reserves.reserve_b) - token_b.amount - token_b.admin_fee).value,
            (S(reserves.pool_token_supply) - pool_token_amount).value,
        )
    except SafeIntError:
        raise _fail("withdraw", pool_token_amount=pool_token_amount) from None

    logger.debug(
        "withdraw_quoted",
        pool_token_amount=pool_token_amount,
        amount_a=token_a.amount,
        amount_b=token_b.amount,
        fee_a=token_a.fee,
        fee_b=token_b.fee,
    )
    return WithdrawQuote(
        pool_token_amount=pool_token_amount,
        token_a=token_a,
        token_b=token_b,
        new_reserves=new_reserves,
    )


def quote_withdraw_one(
    config: PoolConfig,
    reserves: ReserveSnapshot,
    now: int,
    pool_token_amount: int,
    minimum_token_amount: int,
    base: Token,
) -> WithdrawOneQuote | None:
    """Price a withdrawal paid entirely in one asset.

    Raises:
        EmptyPool: If the pool has no LP supply
        InvalidInput: If pool_token_amount exceeds the supply
        CalculationFailure: If curve or fee arithmetic fails
        ExceededSlippage: If the amount paid < minimum_token_amount
    """
    if pool_token_amount == 0:
        return None
    if reserves.pool_token_supply == 0:
        raise EmptyPool("Cannot withdraw from a pool with no LP supply")
    if pool_token_amount > reserves.pool_token_supply:
        raise InvalidInput(
            f"Cannot burn {pool_token_amount} of {reserves.pool_token_supply} LP tokens"
        )

    fees = config.fees
    base_reserve = _reserve(reserves, base)
    invariant = StableSwap(config.amp, now)
    withdrawn = invariant.compute_withdraw_one(
        pool_token_amount,
        reserves.pool_token_supply,
        base_reserve,
        _reserve(reserves, base.other),
        fees,
    )
    if withdrawn is None:
        raise _fail("withdraw_one", pool_token_amount=pool_token_amount, base=base.value)
    dy, dy_fee = withdrawn

    withdraw_fee = fees.withdraw_fee(dy)
    if withdraw_fee is None or withdraw_fee > dy:
        raise _fail("withdraw_one", pool_token_amount=pool_token_amount, base=base.value)
    token_amount = dy - withdraw_fee
    _check_slippage(minimum_token_amount, token_amount)

    admin_trade_fee = fees.admin_trade_fee(dy_fee)
    admin_withdraw_fee = fees.admin_withdraw_fee(withdraw_fee)
    if admin_trade_fee is None or admin_withdraw_fee is None:
        raise _fail("withdraw_one", pool_token_amount=pool_token_amount, base=base.value)
    try:
        admin_fee = (S(admin_trade_fee) + admin_withdraw_fee).to_u64()
        new_base_reserve = (S(base_reserve) - token_amount - admin_fee).value
        new_supply = (S(reserves.pool_token_supply) - pool_token_amount).value
    except SafeIntError:
        raise _fail(
            "withdraw_one", pool_token_amount=pool_token_amount, base=base.value
        ) from None

    logger.debug(
        "withdraw_one_quoted",
        base=base.value,
        pool_token_amount=pool_token_amount,
        amount=token_amount,
        trade_fee=dy_fee,
        withdraw_fee=withdraw_fee,
        ts=now,
    )
    return WithdrawOneQuote(
        base=base,
        pool_token_amount=pool_token_amount,
        amount=token_amount,
        trade_fee=dy_fee,
        withdraw_fee=withdraw_fee,
        admin_fee=admin_fee,
        new_reserves=_with_reserve(reserves, base, new_base_reserve, new_supply),
    )
