"""Pool fee schedule.

Fees are four numerator/denominator pairs stored as unsigned 64-bit
integers. The packed form is the 64-byte record other components persist:
eight little-endian u64 fields in declaration order, no padding.
"""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass, fields

from stableswap.constants import FEES_LEN
from stableswap.math.wide_math import mul_div, mul_div_imbalanced
from stableswap.safe_int import U64_MAX

_FEES_STRUCT = struct.Struct("<8Q")
assert _FEES_STRUCT.size == FEES_LEN


@dataclass(frozen=True)
class Fees:
    """Fee schedule of a pool.

    Every fee is floor(amount * numerator / denominator). A zero
    denominator makes the corresponding fee function return None rather
    than raising; construction does not reject it so that a stored record
    always unpacks.

    Attributes:
        admin_trade_fee_numerator: Share of the trade fee skimmed to the admin
        admin_trade_fee_denominator: Denominator of the admin trade share
        admin_withdraw_fee_numerator: Share of the withdraw fee skimmed to the admin
        admin_withdraw_fee_denominator: Denominator of the admin withdraw share
        trade_fee_numerator: Fee charged on swap output
        trade_fee_denominator: Denominator of the trade fee
        withdraw_fee_numerator: Fee charged on withdrawals
        withdraw_fee_denominator: Denominator of the withdraw fee
    """

    admin_trade_fee_numerator: int = 0
    admin_trade_fee_denominator: int = 0
    admin_withdraw_fee_numerator: int = 0
    admin_withdraw_fee_denominator: int = 0
    trade_fee_numerator: int = 0
    trade_fee_denominator: int = 0
    withdraw_fee_numerator: int = 0
    withdraw_fee_denominator: int = 0

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{field.name} must be an int")
            if not (0 <= value <= U64_MAX):
                raise ValueError(f"{field.name} must fit in u64: {value}")

    def admin_trade_fee(self, fee_amount: int) -> int | None:
        """Admin share of a trade fee."""
        return mul_div_imbalanced(
            fee_amount,
            self.admin_trade_fee_numerator,
            self.admin_trade_fee_denominator,
        )

    def admin_withdraw_fee(self, fee_amount: int) -> int | None:
        """Admin share of a withdraw fee."""
        return mul_div_imbalanced(
            fee_amount,
            self.admin_withdraw_fee_numerator,
            self.admin_withdraw_fee_denominator,
        )

    def trade_fee(self, trade_amount: int) -> int | None:
        """Trade fee on a swap output amount."""
        return mul_div_imbalanced(
            trade_amount,
            self.trade_fee_numerator,
            self.trade_fee_denominator,
        )

    def withdraw_fee(self, withdraw_amount: int) -> int | None:
        """Withdraw fee on a withdrawn amount."""
        return mul_div_imbalanced(
            withdraw_amount,
            self.withdraw_fee_numerator,
            self.withdraw_fee_denominator,
        )

    def normalized_trade_fee(self, n_coins: int, amount: int) -> int | None:
        """Per-asset trade fee for imbalanced deposits and withdrawals.

        The trade fee numerator is first scaled by n / (4 * (n - 1)) so that
        charging it on every asset's deviation adds up to roughly what an
        equivalent swap would pay. The 4 is Curve's calibration constant.

        Args:
            n_coins: Number of assets in the pool
            amount: Deviation of one asset from its balanced amount

        Returns:
            The fee, or None if n_coins < 2 or any step fails
        """
        if n_coins < 2:
            return None
        adjusted_trade_fee_numerator = mul_div(
            self.trade_fee_numerator,
            n_coins,
            (n_coins - 1) * 4,
        )
        if adjusted_trade_fee_numerator is None:
            return None
        return mul_div(amount, adjusted_trade_fee_numerator, self.trade_fee_denominator)

    def pack(self) -> bytes:
        """Serialize to the 64-byte little-endian record."""
        return _FEES_STRUCT.pack(*astuple(self))

    @classmethod
    def unpack(cls, data: bytes) -> Fees:
        """Deserialize from a 64-byte record.

        Raises:
            ValueError: If data is not exactly 64 bytes
        """
        if len(data) != FEES_LEN:
            raise ValueError(f"Fees record must be {FEES_LEN} bytes, got {len(data)}")
        return cls(*_FEES_STRUCT.unpack(data))
