"""Tests for the quote layer."""

import pytest
from structlog.testing import capture_logs

from stableswap.config import AmpPolicy
from stableswap.curve.amp import AmpState
from stableswap.errors import (
    CalculationFailure,
    EmptyPool,
    EmptySupply,
    ExceededSlippage,
    InvalidInput,
)
from stableswap.quotes import (
    SwapDirection,
    Token,
    WithdrawAmounts,
    quote_deposit,
    quote_initialize,
    quote_swap,
    quote_withdraw,
    quote_withdraw_one,
)
from stableswap.safe_int import U64_MAX
from stableswap.state import ReserveSnapshot
from tests.helpers import BALANCED_RESERVE, NOW, ONE_DAY, make_config, make_ramp, make_reserves

RESERVE = BALANCED_RESERVE


class TestTokens:
    """Tests for the side enums."""

    def test_other(self):
        assert Token.A.other is Token.B
        assert Token.B.other is Token.A

    def test_direction_source(self):
        assert SwapDirection.A_TO_B.source is Token.A
        assert SwapDirection.B_TO_A.source is Token.B


class TestQuoteInitialize:
    """Tests for bootstrapping a pool."""

    def test_mints_d(self):
        quote = quote_initialize(100, RESERVE, RESERVE)
        assert quote.mint_amount == 2 * RESERVE
        assert quote.amp == AmpState.fixed(100)
        assert quote.reserves == ReserveSnapshot(RESERVE, RESERVE, 2 * RESERVE)

    def test_imbalanced_mints_less_than_sum(self):
        quote = quote_initialize(100, RESERVE, RESERVE // 4)
        assert quote.mint_amount < RESERVE + RESERVE // 4

    def test_logs_pool_initialized(self):
        with capture_logs() as logs:
            quote_initialize(100, RESERVE, RESERVE)
        assert logs[0]["event"] == "pool_initialized"
        assert logs[0]["mint_amount"] == 2 * RESERVE

    @pytest.mark.parametrize("amp", [0, 1_000_001])
    def test_amp_out_of_bounds(self, amp):
        with pytest.raises(InvalidInput):
            quote_initialize(amp, RESERVE, RESERVE)

    def test_custom_policy(self):
        with pytest.raises(InvalidInput):
            quote_initialize(100, RESERVE, RESERVE, AmpPolicy(max_amp=50))

    @pytest.mark.parametrize("reserve_a,reserve_b", [(0, RESERVE), (RESERVE, 0)])
    def test_empty_reserve(self, reserve_a, reserve_b):
        with pytest.raises(EmptySupply):
            quote_initialize(100, reserve_a, reserve_b)

    def test_overflow(self):
        with pytest.raises(CalculationFailure):
            quote_initialize(100, U64_MAX, U64_MAX)


class TestQuoteSwap:
    """Tests for swap quotes."""

    def test_a_to_b_updates_reserves(self, fee_config, balanced_reserves):
        quote = quote_swap(fee_config, balanced_reserves, NOW, 10_000_000, 0, SwapDirection.A_TO_B)
        result = quote.result
        assert quote.new_reserves == ReserveSnapshot(
            RESERVE + 10_000_000,
            RESERVE - result.amount_swapped - result.admin_fee,
            balanced_reserves.pool_token_supply,
        )

    def test_b_to_a_updates_reserves(self, fee_config, balanced_reserves):
        quote = quote_swap(fee_config, balanced_reserves, NOW, 10_000_000, 0, SwapDirection.B_TO_A)
        result = quote.result
        assert quote.new_reserves.reserve_b == RESERVE + 10_000_000
        assert quote.new_reserves.reserve_a == RESERVE - result.amount_swapped - result.admin_fee

    def test_symmetric_pool_symmetric_quotes(self, fee_config, balanced_reserves):
        a_to_b = quote_swap(fee_config, balanced_reserves, NOW, 5_000_000, 0, SwapDirection.A_TO_B)
        b_to_a = quote_swap(fee_config, balanced_reserves, NOW, 5_000_000, 0, SwapDirection.B_TO_A)
        assert a_to_b.result.amount_swapped == b_to_a.result.amount_swapped

    def test_zero_amount_is_noop(self, fee_config, balanced_reserves):
        assert quote_swap(fee_config, balanced_reserves, NOW, 0, 0, SwapDirection.A_TO_B) is None

    def test_slippage(self, fee_config, balanced_reserves):
        quote = quote_swap(fee_config, balanced_reserves, NOW, 10_000_000, 0, SwapDirection.A_TO_B)
        minimum = quote.result.amount_swapped + 1
        with pytest.raises(ExceededSlippage) as exc_info:
            quote_swap(fee_config, balanced_reserves, NOW, 10_000_000, minimum, SwapDirection.A_TO_B)
        assert exc_info.value.expected == minimum
        assert exc_info.value.actual == quote.result.amount_swapped

    def test_exact_minimum_passes(self, fee_config, balanced_reserves):
        quote = quote_swap(fee_config, balanced_reserves, NOW, 10_000_000, 0, SwapDirection.A_TO_B)
        again = quote_swap(
            fee_config,
            balanced_reserves,
            NOW,
            10_000_000,
            quote.result.amount_swapped,
            SwapDirection.A_TO_B,
        )
        assert again == quote

    def test_priced_at_ramp_time(self, balanced_reserves):
        config = make_config(make_ramp(10, 1_000))
        early = quote_swap(config, balanced_reserves, NOW, 500_000_000, 0, SwapDirection.A_TO_B)
        late = quote_swap(
            config, balanced_reserves, NOW + ONE_DAY, 500_000_000, 0, SwapDirection.A_TO_B
        )
        assert early.result.amount_swapped < late.result.amount_swapped

    def test_empty_destination_fails(self, fee_config):
        reserves = ReserveSnapshot(RESERVE, 0, RESERVE)
        with capture_logs() as logs:
            with pytest.raises(CalculationFailure):
                quote_swap(fee_config, reserves, NOW, 1_000, 0, SwapDirection.A_TO_B)
        assert logs[0]["event"] == "calculation_failed"
        assert logs[0]["operation"] == "swap"


class TestQuoteDeposit:
    """Tests for deposit quotes."""

    def test_proportional(self, fee_config):
        reserves = make_reserves(supply=1_000_000)
        quote = quote_deposit(fee_config, reserves, NOW, 10_000_000, 10_000_000, 0)
        assert quote.mint_amount == 10_000
        assert quote.new_reserves == ReserveSnapshot(
            RESERVE + 10_000_000, RESERVE + 10_000_000, 1_010_000
        )

    def test_single_sided(self, fee_config, balanced_reserves):
        quote = quote_deposit(fee_config, balanced_reserves, NOW, 10_000_000, 0, 0)
        assert 0 < quote.mint_amount < 10_000_000
        assert quote.new_reserves.reserve_b == RESERVE

    def test_zero_amounts_are_noop(self, fee_config, balanced_reserves):
        assert quote_deposit(fee_config, balanced_reserves, NOW, 0, 0, 0) is None

    def test_empty_pool(self, fee_config):
        with pytest.raises(EmptyPool):
            quote_deposit(fee_config, ReserveSnapshot(0, 0, 0), NOW, 1_000, 1_000, 0)

    def test_slippage(self, fee_config):
        reserves = make_reserves(supply=1_000_000)
        with pytest.raises(ExceededSlippage) as exc_info:
            quote_deposit(fee_config, reserves, NOW, 10_000_000, 10_000_000, 10_001)
        assert exc_info.value.actual == 10_000

    def test_reserve_overflow_fails(self, fee_config):
        reserves = make_reserves(U64_MAX - 10, 1_000, supply=1_000)
        with pytest.raises(CalculationFailure):
            quote_deposit(fee_config, reserves, NOW, 100, 0, 0)


class TestQuoteWithdraw:
    """Tests for proportional withdrawal quotes."""

    def test_fee_free(self, fee_free_config, balanced_reserves):
        quote = quote_withdraw(fee_free_config, balanced_reserves, 200_000_000, 0, 0)
        assert quote.token_a == WithdrawAmounts(100_000_000, 0, 0)
        assert quote.token_b == WithdrawAmounts(100_000_000, 0, 0)
        assert quote.new_reserves == ReserveSnapshot(
            RESERVE - 100_000_000, RESERVE - 100_000_000, 2 * RESERVE - 200_000_000
        )

    def test_with_fees(self, fee_config, balanced_reserves):
        quote = quote_withdraw(fee_config, balanced_reserves, 200_000_000, 0, 0)
        assert quote.token_a == WithdrawAmounts(99_890_010, 109_990, 54_995)
        # Only the admin part of the fee leaves the pool with the user's amount
        assert quote.new_reserves.reserve_a == RESERVE - 99_890_010 - 54_995

    def test_zero_amount_is_noop(self, fee_config, balanced_reserves):
        assert quote_withdraw(fee_config, balanced_reserves, 0, 0, 0) is None

    def test_empty_pool(self, fee_config):
        with pytest.raises(EmptyPool):
            quote_withdraw(fee_config, ReserveSnapshot(RESERVE, RESERVE, 0), 1, 0, 0)

    def test_share_above_supply(self, fee_config, balanced_reserves):
        with pytest.raises(InvalidInput):
            quote_withdraw(fee_config, balanced_reserves, 2 * RESERVE + 1, 0, 0)

    def test_full_withdrawal_fee_free(self, fee_free_config, balanced_reserves):
        quote = quote_withdraw(fee_free_config, balanced_reserves, 2 * RESERVE, 0, 0)
        assert quote.new_reserves == ReserveSnapshot(0, 0, 0)

    def test_slippage_on_b(self, fee_free_config, balanced_reserves):
        with pytest.raises(ExceededSlippage) as exc_info:
            quote_withdraw(fee_free_config, balanced_reserves, 200_000_000, 0, 100_000_001)
        assert exc_info.value.expected == 100_000_001
        assert exc_info.value.actual == 100_000_000


class TestQuoteWithdrawOne:
    """Tests for single-asset withdrawal quotes."""

    def test_fee_free(self, fee_free_config, balanced_reserves):
        quote = quote_withdraw_one(
            fee_free_config, balanced_reserves, NOW, 1_000_000, 0, Token.A
        )
        assert 990_000 < quote.amount < 1_000_000
        assert quote.withdraw_fee == 0
        assert quote.admin_fee == 0
        assert quote.new_reserves == ReserveSnapshot(
            RESERVE - quote.amount, RESERVE, 2 * RESERVE - 1_000_000
        )

    def test_with_fees(self, fee_config, balanced_reserves):
        quote = quote_withdraw_one(fee_config, balanced_reserves, NOW, 100_000_000, 0, Token.B)
        dy = quote.amount + quote.withdraw_fee
        assert quote.withdraw_fee == dy * 10 // 10_000
        assert quote.admin_fee == quote.trade_fee * 5_000 // 10_000 + quote.withdraw_fee // 2
        assert quote.new_reserves == ReserveSnapshot(
            RESERVE,
            RESERVE - quote.amount - quote.admin_fee,
            2 * RESERVE - 100_000_000,
        )

    def test_full_drain_keeps_one_unit(self, fee_free_config):
        supply = quote_initialize(100, RESERVE, RESERVE // 2).mint_amount
        reserves = ReserveSnapshot(RESERVE, RESERVE // 2, supply)
        quote = quote_withdraw_one(fee_free_config, reserves, NOW, supply, 0, Token.A)
        assert quote.amount == RESERVE - 1
        assert quote.trade_fee == 1
        assert quote.new_reserves == ReserveSnapshot(1, RESERVE // 2, 0)

    def test_zero_amount_is_noop(self, fee_config, balanced_reserves):
        assert quote_withdraw_one(fee_config, balanced_reserves, NOW, 0, 0, Token.A) is None

    def test_empty_pool(self, fee_config):
        with pytest.raises(EmptyPool):
            quote_withdraw_one(fee_config, ReserveSnapshot(RESERVE, RESERVE, 0), NOW, 1, 0, Token.A)

    def test_share_above_supply(self, fee_config, balanced_reserves):
        with pytest.raises(InvalidInput):
            quote_withdraw_one(fee_config, balanced_reserves, NOW, 2 * RESERVE + 1, 0, Token.A)

    def test_slippage(self, fee_config, balanced_reserves):
        with pytest.raises(ExceededSlippage):
            quote_withdraw_one(fee_config, balanced_reserves, NOW, 1_000_000, 1_000_000, Token.A)

    def test_zero_fee_denominator_fails(self, balanced_reserves):
        config = make_config(denominator=0)
        with pytest.raises(CalculationFailure):
            quote_withdraw_one(config, balanced_reserves, NOW, 1_000_000, 0, Token.A)
