"""StableSwap pool calculator.

Binds an amplification state and a timestamp to the curve math and composes
it with the fee schedule into swap, deposit and single-asset withdrawal
amounts. Every method returns None when any arithmetic step fails; nothing
is partially computed.
"""

from __future__ import annotations

from dataclasses import dataclass

from stableswap.constants import N_COINS
from stableswap.curve.amp import AmpState, compute_amp_factor
from stableswap.curve.stable_math import compute_d, compute_output_for_input, compute_y
from stableswap.fees import Fees
from stableswap.safe_int import S, SafeIntError


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap.

    Attributes:
        new_source_amount: Source reserve after the swap
        new_destination_amount: Destination reserve after paying the user
            and the admin fee
        amount_swapped: Amount paid to the user
        admin_fee: Admin share of the trade fee, leaves the pool
        fee: Total trade fee; fee - admin_fee stays in the reserves
    """

    new_source_amount: int
    new_destination_amount: int
    amount_swapped: int
    admin_fee: int
    fee: int


@dataclass(frozen=True)
class StableSwap:
    """Curve calculator for one pool at one instant.

    Attributes:
        amp: The pool's amplification state
        current_ts: Unix timestamp the quote is made at
    """

    amp: AmpState
    current_ts: int

    @property
    def amp_factor(self) -> int:
        """Effective amplification coefficient at current_ts."""
        return compute_amp_factor(self.amp, self.current_ts)

    def compute_d(self, amount_a: int, amount_b: int) -> int | None:
        """Invariant D of the given reserves."""
        return compute_d(amount_a, amount_b, self.amp_factor)

    def compute_y(self, x: int, d: int) -> int | None:
        """Reserve of the other asset that keeps D given reserve x."""
        return compute_y(x, d, self.amp_factor)

    def swap_to(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        fees: Fees,
    ) -> SwapResult | None:
        """Price a swap of source_amount into the pool.

        One unit of the raw curve output is withheld to absorb rounding,
        then the trade fee is taken from what remains. Only the user's
        amount and the admin skim leave the destination reserve.

        Args:
            source_amount: Amount the user pays in
            swap_source_amount: Pool reserve of the asset paid in
            swap_destination_amount: Pool reserve of the asset paid out
            fees: Fee schedule

        Returns:
            SwapResult, or None if any step fails
        """
        raw = compute_output_for_input(
            source_amount, swap_source_amount, swap_destination_amount, self.amp_factor
        )
        if raw is None:
            return None
        try:
            dy = S(raw) - 1
            dy_fee = fees.trade_fee(dy.value)
            if dy_fee is None:
                return None
            admin_fee = fees.admin_trade_fee(dy_fee)
            if admin_fee is None:
                return None

            amount_swapped = dy - dy_fee
            new_destination_amount = S(swap_destination_amount) - amount_swapped - admin_fee
            new_source_amount = (S(swap_source_amount) + source_amount).to_u64()
        except SafeIntError:
            return None

        return SwapResult(
            new_source_amount=new_source_amount,
            new_destination_amount=new_destination_amount.value,
            amount_swapped=amount_swapped.value,
            admin_fee=admin_fee,
            fee=dy_fee,
        )

    def compute_mint_amount_for_deposit(
        self,
        deposit_amount_a: int,
        deposit_amount_b: int,
        swap_amount_a: int,
        swap_amount_b: int,
        pool_token_supply: int,
        fees: Fees,
    ) -> int | None:
        """LP tokens to mint for a two-asset deposit.

        Algorithm:
            1. D0 from current reserves, D1 after adding both deposits
            2. For each asset, ideal = D1 * old / D0; charge the normalized
               trade fee on |ideal - new| and take it off the new reserve
            3. D2 from the fee-adjusted reserves
            4. Mint supply * (D2 - D0) / D0

        A deposit in the pool's current ratio pays no fee and mints exactly
        supply * deposit / reserve for either asset; D rounding would
        otherwise round that up by a unit on pools that are not 1:1.

        Args:
            deposit_amount_a: Amount of asset A deposited
            deposit_amount_b: Amount of asset B deposited
            swap_amount_a: Pool reserve of asset A
            swap_amount_b: Pool reserve of asset B
            pool_token_supply: Current LP token supply
            fees: Fee schedule

        Returns:
            The mint amount, or None if the deposit does not grow D or any
            step fails
        """
        d_0 = self.compute_d(swap_amount_a, swap_amount_b)
        if d_0 is None:
            return None
        try:
            old_balances = [swap_amount_a, swap_amount_b]
            new_balances = [
                (S(swap_amount_a) + deposit_amount_a).to_u64(),
                (S(swap_amount_b) + deposit_amount_b).to_u64(),
            ]
        except SafeIntError:
            return None

        d_1 = self.compute_d(new_balances[0], new_balances[1])
        if d_1 is None or d_1 <= d_0:
            return None

        try:
            # In the pool's ratio: exactly the pro-rata share, so D rounding
            # never mints an extra unit against existing holders
            if S(deposit_amount_a) * swap_amount_b == S(deposit_amount_b) * swap_amount_a:
                return ((S(pool_token_supply) * deposit_amount_a) // swap_amount_a).to_u64()

            for i, old_balance in enumerate(old_balances):
                ideal_balance = ((S(d_1) * old_balance) // d_0).to_u64()
                difference = S(ideal_balance).abs_diff(new_balances[i])
                fee = fees.normalized_trade_fee(N_COINS, difference.value)
                if fee is None:
                    return None
                new_balances[i] = (S(new_balances[i]) - fee).value

            d_2 = self.compute_d(new_balances[0], new_balances[1])
            if d_2 is None:
                return None
            return ((S(pool_token_supply) * (S(d_2) - d_0)) // d_0).to_u64()
        except SafeIntError:
            return None

    def compute_withdraw_one(
        self,
        pool_token_amount: int,
        pool_token_supply: int,
        swap_base_amount: int,
        swap_quote_amount: int,
        fees: Fees,
    ) -> tuple[int, int] | None:
        """Amount of one asset paid for burning pool_token_amount.

        Burning shrinks D to D1 = D0 - share * D0 / supply. Taking the whole
        reduction from the base asset is an imbalanced withdrawal, so both
        assets are charged the normalized trade fee on how far the naive
        withdrawal moves them from the balanced D1 reserves, and y is
        solved again on the fee-adjusted quote reserve.

        Args:
            pool_token_amount: LP tokens burned
            pool_token_supply: Current LP token supply
            swap_base_amount: Pool reserve of the asset withdrawn
            swap_quote_amount: Pool reserve of the other asset
            fees: Fee schedule

        Returns:
            (dy, dy_fee): the amount before the withdraw fee, and the trade
            fee component charged on the base asset. None if any step fails.
        """
        d_0 = self.compute_d(swap_base_amount, swap_quote_amount)
        if d_0 is None:
            return None
        try:
            d_1 = (S(d_0) - (S(pool_token_amount) * d_0) // pool_token_supply).value
            new_y = self.compute_y(swap_quote_amount, d_1)
            if new_y is None:
                return None

            # expected_base_amount = swap_base_amount * d_1 / d_0 - new_y
            expected_base_amount = S(((S(swap_base_amount) * d_1) // d_0).to_u64()) - new_y
            # expected_quote_amount = swap_quote_amount - swap_quote_amount * d_1 / d_0
            expected_quote_amount = S(swap_quote_amount) - (
                (S(swap_quote_amount) * d_1) // d_0
            ).to_u64()

            base_fee = fees.normalized_trade_fee(N_COINS, expected_base_amount.value)
            quote_fee = fees.normalized_trade_fee(N_COINS, expected_quote_amount.value)
            if base_fee is None or quote_fee is None:
                return None
            new_base_amount = S(swap_base_amount) - base_fee
            new_quote_amount = S(swap_quote_amount) - quote_fee

            adjusted_y = self.compute_y(new_quote_amount.value, d_1)
            if adjusted_y is None:
                return None
            # Withdraw one unit less to absorb rounding
            dy = new_base_amount - adjusted_y - 1
            dy_0 = S(swap_base_amount) - new_y
            return dy.value, (dy_0 - dy).value
        except SafeIntError:
            return None
