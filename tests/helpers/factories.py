"""Factory functions for pool state used in tests.

Usage:
    from tests.helpers import make_config, make_reserves

    config = make_config(amp=100, trade_fee=4)
    reserves = make_reserves(1_000_000, 1_000_000, supply=2_000_000)
"""

from stableswap.curve.amp import AmpState
from stableswap.fees import Fees
from stableswap.state import PoolConfig, ReserveSnapshot
from tests.helpers.constants import (
    BALANCED_RESERVE,
    DEFAULT_AMP,
    FEE_DENOMINATOR,
    NOW,
    ONE_DAY,
)


def make_fees(
    trade_fee: int = 0,
    withdraw_fee: int = 0,
    admin_trade_fee: int = 0,
    admin_withdraw_fee: int = 0,
    denominator: int = FEE_DENOMINATOR,
) -> Fees:
    """Create a fee schedule with a shared denominator.

    Args:
        trade_fee: Trade fee numerator
        withdraw_fee: Withdraw fee numerator
        admin_trade_fee: Admin share numerator of the trade fee
        admin_withdraw_fee: Admin share numerator of the withdraw fee
        denominator: Denominator for all four fees (default: 10,000)

    Returns:
        Fees with every denominator set, so zero numerators mean zero fees
    """
    return Fees(
        admin_trade_fee_numerator=admin_trade_fee,
        admin_trade_fee_denominator=denominator,
        admin_withdraw_fee_numerator=admin_withdraw_fee,
        admin_withdraw_fee_denominator=denominator,
        trade_fee_numerator=trade_fee,
        trade_fee_denominator=denominator,
        withdraw_fee_numerator=withdraw_fee,
        withdraw_fee_denominator=denominator,
    )


def make_ramp(
    initial: int,
    target: int,
    start: int = NOW,
    duration: int = ONE_DAY,
) -> AmpState:
    """Create an amplification state ramping from initial to target."""
    return AmpState(initial, target, start, start + duration)


def make_config(amp: int | AmpState = DEFAULT_AMP, **fee_kwargs: int) -> PoolConfig:
    """Create a pool config; extra keyword arguments go to make_fees."""
    amp_state = amp if isinstance(amp, AmpState) else AmpState.fixed(amp)
    return PoolConfig(amp=amp_state, fees=make_fees(**fee_kwargs))


def make_reserves(
    reserve_a: int = BALANCED_RESERVE,
    reserve_b: int = BALANCED_RESERVE,
    supply: int | None = None,
) -> ReserveSnapshot:
    """Create a reserve snapshot.

    The LP supply defaults to reserve_a + reserve_b, which is D for a
    balanced pool.
    """
    if supply is None:
        supply = reserve_a + reserve_b
    return ReserveSnapshot(reserve_a, reserve_b, supply)


def make_pool_payload(
    amp: int = DEFAULT_AMP,
    reserve_a: int = BALANCED_RESERVE,
    reserve_b: int = BALANCED_RESERVE,
    supply: int | None = None,
    trade_fee: int = 0,
    withdraw_fee: int = 0,
    admin_fee: int = 0,
) -> dict:
    """Create the JSON pool object accepted by the quote API."""
    if supply is None:
        supply = reserve_a + reserve_b
    denominator = str(FEE_DENOMINATOR)
    return {
        "amp": {"initialAmpFactor": amp, "targetAmpFactor": amp},
        "fees": {
            "adminTradeFeeNumerator": str(admin_fee),
            "adminTradeFeeDenominator": denominator,
            "adminWithdrawFeeNumerator": str(admin_fee),
            "adminWithdrawFeeDenominator": denominator,
            "tradeFeeNumerator": str(trade_fee),
            "tradeFeeDenominator": denominator,
            "withdrawFeeNumerator": str(withdraw_fee),
            "withdrawFeeDenominator": denominator,
        },
        "reserves": {
            "reserveA": str(reserve_a),
            "reserveB": str(reserve_b),
            "poolTokenSupply": str(supply),
        },
    }
