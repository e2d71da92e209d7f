"""Conversion of LP tokens into proportional reserve amounts."""

from __future__ import annotations

from dataclasses import dataclass

from stableswap.constants import N_COINS
from stableswap.fees import Fees
from stableswap.math.wide_math import mul_div
from stableswap.safe_int import S, SafeIntError

# (amount to user, total fee, admin share of the fee)
WithdrawRate = tuple[int, int, int]


@dataclass(frozen=True)
class PoolTokenConverter:
    """Prices a proportional withdrawal against a reserve snapshot.

    Attributes:
        supply: LP token supply
        token_a: Pool reserve of asset A
        token_b: Pool reserve of asset B
        fees: Fee schedule
    """

    supply: int
    token_a: int
    token_b: int
    fees: Fees

    def token_a_rate(self, pool_tokens: int) -> WithdrawRate | None:
        """Asset A paid for burning pool_tokens."""
        return self._rate(pool_tokens, self.token_a)

    def token_b_rate(self, pool_tokens: int) -> WithdrawRate | None:
        """Asset B paid for burning pool_tokens."""
        return self._rate(pool_tokens, self.token_b)

    def _rate(self, pool_tokens: int, reserve: int) -> WithdrawRate | None:
        # Ideal, fee-free share of the reserve
        amount = mul_div(reserve, pool_tokens, self.supply)
        if amount is None:
            return None

        # The balanced portion of each asset's share is n-1 of n parts
        imbalance = mul_div(amount, N_COINS - 1, N_COINS)
        if imbalance is None:
            return None
        trade_fee = self.fees.normalized_trade_fee(N_COINS, imbalance)
        if trade_fee is None:
            return None

        try:
            after_trade_fee = S(amount) - trade_fee
            withdraw_fee = self.fees.withdraw_fee(after_trade_fee.value)
            if withdraw_fee is None:
                return None
            admin_trade_fee = self.fees.admin_trade_fee(trade_fee)
            admin_withdraw_fee = self.fees.admin_withdraw_fee(withdraw_fee)
            if admin_trade_fee is None or admin_withdraw_fee is None:
                return None
            admin_fee = (S(admin_trade_fee) + admin_withdraw_fee).to_u64()
            user_amount = after_trade_fee - withdraw_fee
            total_fee = (S(trade_fee) + withdraw_fee).to_u64()
        except SafeIntError:
            return None

        return user_amount.value, total_fee, admin_fee


def quote_withdraw_amounts(
    pool_token_amount: int,
    pool_token_supply: int,
    reserve_a: int,
    reserve_b: int,
    fees: Fees,
) -> tuple[WithdrawRate, WithdrawRate] | None:
    """Both assets paid for a proportional withdrawal.

    Returns:
        ((amount_a, fee_a, admin_fee_a), (amount_b, fee_b, admin_fee_b)),
        or None if either side fails
    """
    converter = PoolTokenConverter(
        supply=pool_token_supply,
        token_a=reserve_a,
        token_b=reserve_b,
        fees=fees,
    )
    rate_a = converter.token_a_rate(pool_token_amount)
    rate_b = converter.token_b_rate(pool_token_amount)
    if rate_a is None or rate_b is None:
        return None
    return rate_a, rate_b
