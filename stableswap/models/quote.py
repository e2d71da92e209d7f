"""Pydantic models for quote requests and responses.

Amounts travel as decimal strings so that u64 values survive JSON clients
that parse numbers as doubles.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from stableswap.constants import FEES_LEN, MAX_AMP, MIN_AMP
from stableswap.curve.amp import AmpState
from stableswap.fees import Fees
from stableswap.models.types import Bytes, Uint64
from stableswap.quotes import (
    DepositQuote,
    InitializeQuote,
    SwapDirection,
    SwapQuote,
    Token,
    WithdrawAmounts,
    WithdrawOneQuote,
    WithdrawQuote,
)
from stableswap.state import PoolConfig, ReserveSnapshot

# =============================================================================
# Pool state
# =============================================================================


class FeeFields(BaseModel):
    """Fee schedule given field by field."""

    admin_trade_fee_numerator: Uint64 = Field(default="0", alias="adminTradeFeeNumerator")
    admin_trade_fee_denominator: Uint64 = Field(default="0", alias="adminTradeFeeDenominator")
    admin_withdraw_fee_numerator: Uint64 = Field(default="0", alias="adminWithdrawFeeNumerator")
    admin_withdraw_fee_denominator: Uint64 = Field(
        default="0", alias="adminWithdrawFeeDenominator"
    )
    trade_fee_numerator: Uint64 = Field(default="0", alias="tradeFeeNumerator")
    trade_fee_denominator: Uint64 = Field(default="0", alias="tradeFeeDenominator")
    withdraw_fee_numerator: Uint64 = Field(default="0", alias="withdrawFeeNumerator")
    withdraw_fee_denominator: Uint64 = Field(default="0", alias="withdrawFeeDenominator")

    model_config = {"populate_by_name": True, "extra": "forbid"}

    def to_fees(self) -> Fees:
        return Fees(
            admin_trade_fee_numerator=int(self.admin_trade_fee_numerator),
            admin_trade_fee_denominator=int(self.admin_trade_fee_denominator),
            admin_withdraw_fee_numerator=int(self.admin_withdraw_fee_numerator),
            admin_withdraw_fee_denominator=int(self.admin_withdraw_fee_denominator),
            trade_fee_numerator=int(self.trade_fee_numerator),
            trade_fee_denominator=int(self.trade_fee_denominator),
            withdraw_fee_numerator=int(self.withdraw_fee_numerator),
            withdraw_fee_denominator=int(self.withdraw_fee_denominator),
        )


class PackedFees(BaseModel):
    """Fee schedule given as the hex of its 64-byte record."""

    packed: Bytes = Field(
        min_length=2 + 2 * FEES_LEN,
        max_length=2 + 2 * FEES_LEN,
        description="0x-prefixed hex of the 64-byte little-endian fee record",
    )

    model_config = {"extra": "forbid"}

    def to_fees(self) -> Fees:
        return Fees.unpack(bytes.fromhex(self.packed[2:]))


class AmpModel(BaseModel):
    """Amplification state."""

    initial_amp_factor: int = Field(ge=MIN_AMP, le=MAX_AMP, alias="initialAmpFactor")
    target_amp_factor: int = Field(ge=MIN_AMP, le=MAX_AMP, alias="targetAmpFactor")
    start_ramp_ts: int = Field(default=0, ge=0, alias="startRampTs")
    stop_ramp_ts: int = Field(default=0, ge=0, alias="stopRampTs")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_ramp_window(self) -> AmpModel:
        if self.stop_ramp_ts < self.start_ramp_ts:
            raise ValueError("stopRampTs must not be before startRampTs")
        return self

    def to_amp_state(self) -> AmpState:
        return AmpState(
            initial_amp_factor=self.initial_amp_factor,
            target_amp_factor=self.target_amp_factor,
            start_ramp_ts=self.start_ramp_ts,
            stop_ramp_ts=self.stop_ramp_ts,
        )

    @classmethod
    def from_amp_state(cls, amp: AmpState) -> AmpModel:
        return cls(
            initial_amp_factor=amp.initial_amp_factor,
            target_amp_factor=amp.target_amp_factor,
            start_ramp_ts=amp.start_ramp_ts,
            stop_ramp_ts=amp.stop_ramp_ts,
        )


class ReservesModel(BaseModel):
    """Reserve snapshot."""

    reserve_a: Uint64 = Field(alias="reserveA")
    reserve_b: Uint64 = Field(alias="reserveB")
    pool_token_supply: Uint64 = Field(default="0", alias="poolTokenSupply")

    model_config = {"populate_by_name": True}

    def to_snapshot(self) -> ReserveSnapshot:
        return ReserveSnapshot(
            int(self.reserve_a), int(self.reserve_b), int(self.pool_token_supply)
        )

    @classmethod
    def from_snapshot(cls, snapshot: ReserveSnapshot) -> ReservesModel:
        return cls(
            reserve_a=str(snapshot.reserve_a),
            reserve_b=str(snapshot.reserve_b),
            pool_token_supply=str(snapshot.pool_token_supply),
        )


class PoolModel(BaseModel):
    """Everything a quote is priced against."""

    amp: AmpModel
    fees: FeeFields | PackedFees = Field(union_mode="left_to_right")
    reserves: ReservesModel

    def to_config(self) -> PoolConfig:
        return PoolConfig(amp=self.amp.to_amp_state(), fees=self.fees.to_fees())


# =============================================================================
# Requests
# =============================================================================


class QuoteRequest(BaseModel):
    """Common fields of requests priced against an existing pool."""

    pool: PoolModel
    now: int | None = Field(
        default=None,
        ge=0,
        description="Unix timestamp to price at. Defaults to the server clock.",
    )

    model_config = {"populate_by_name": True}


class InitializeRequest(BaseModel):
    amp_factor: int = Field(alias="ampFactor")
    reserve_a: Uint64 = Field(alias="reserveA")
    reserve_b: Uint64 = Field(alias="reserveB")

    model_config = {"populate_by_name": True}


class SwapRequest(QuoteRequest):
    amount_in: Uint64 = Field(alias="amountIn")
    minimum_amount_out: Uint64 = Field(default="0", alias="minimumAmountOut")
    direction: SwapDirection


class DepositRequest(QuoteRequest):
    amount_a: Uint64 = Field(default="0", alias="amountA")
    amount_b: Uint64 = Field(default="0", alias="amountB")
    min_mint_amount: Uint64 = Field(default="0", alias="minMintAmount")


class WithdrawRequest(QuoteRequest):
    pool_token_amount: Uint64 = Field(alias="poolTokenAmount")
    minimum_token_a_amount: Uint64 = Field(default="0", alias="minimumTokenAAmount")
    minimum_token_b_amount: Uint64 = Field(default="0", alias="minimumTokenBAmount")


class WithdrawOneRequest(QuoteRequest):
    pool_token_amount: Uint64 = Field(alias="poolTokenAmount")
    minimum_token_amount: Uint64 = Field(default="0", alias="minimumTokenAmount")
    base: Token


# =============================================================================
# Responses
# =============================================================================


class InitializeResponse(BaseModel):
    amp: AmpModel
    mint_amount: Uint64 = Field(alias="mintAmount")
    reserves: ReservesModel

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: InitializeQuote) -> InitializeResponse:
        return cls(
            amp=AmpModel.from_amp_state(quote.amp),
            mint_amount=str(quote.mint_amount),
            reserves=ReservesModel.from_snapshot(quote.reserves),
        )


class SwapResponse(BaseModel):
    direction: SwapDirection
    amount_in: Uint64 = Field(alias="amountIn")
    amount_swapped: Uint64 = Field(alias="amountSwapped")
    fee: Uint64
    admin_fee: Uint64 = Field(alias="adminFee")
    reserves: ReservesModel

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> SwapResponse:
        return cls(
            direction=quote.direction,
            amount_in=str(quote.amount_in),
            amount_swapped=str(quote.result.amount_swapped),
            fee=str(quote.result.fee),
            admin_fee=str(quote.result.admin_fee),
            reserves=ReservesModel.from_snapshot(quote.new_reserves),
        )


class DepositResponse(BaseModel):
    mint_amount: Uint64 = Field(alias="mintAmount")
    reserves: ReservesModel

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: DepositQuote) -> DepositResponse:
        return cls(
            mint_amount=str(quote.mint_amount),
            reserves=ReservesModel.from_snapshot(quote.new_reserves),
        )


class WithdrawAmountsModel(BaseModel):
    amount: Uint64
    fee: Uint64
    admin_fee: Uint64 = Field(alias="adminFee")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_amounts(cls, amounts: WithdrawAmounts) -> WithdrawAmountsModel:
        return cls(
            amount=str(amounts.amount),
            fee=str(amounts.fee),
            admin_fee=str(amounts.admin_fee),
        )


class WithdrawResponse(BaseModel):
    pool_token_amount: Uint64 = Field(alias="poolTokenAmount")
    token_a: WithdrawAmountsModel = Field(alias="tokenA")
    token_b: WithdrawAmountsModel = Field(alias="tokenB")
    reserves: ReservesModel

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: WithdrawQuote) -> WithdrawResponse:
        return cls(
            pool_token_amount=str(quote.pool_token_amount),
            token_a=WithdrawAmountsModel.from_amounts(quote.token_a),
            token_b=WithdrawAmountsModel.from_amounts(quote.token_b),
            reserves=ReservesModel.from_snapshot(quote.new_reserves),
        )


class WithdrawOneResponse(BaseModel):
    base: Token
    pool_token_amount: Uint64 = Field(alias="poolTokenAmount")
    amount: Uint64
    trade_fee: Uint64 = Field(alias="tradeFee")
    withdraw_fee: Uint64 = Field(alias="withdrawFee")
    admin_fee: Uint64 = Field(alias="adminFee")
    reserves: ReservesModel

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: WithdrawOneQuote) -> WithdrawOneResponse:
        return cls(
            base=quote.base,
            pool_token_amount=str(quote.pool_token_amount),
            amount=str(quote.amount),
            trade_fee=str(quote.trade_fee),
            withdraw_fee=str(quote.withdraw_fee),
            admin_fee=str(quote.admin_fee),
            reserves=ReservesModel.from_snapshot(quote.new_reserves),
        )


class ErrorResponse(BaseModel):
    """Body returned for a rejected quote."""

    error: str
    detail: str
    expected: Uint64 | None = None
    actual: Uint64 | None = None
