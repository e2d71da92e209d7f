"""Caller-supplied pool snapshots."""

from __future__ import annotations

from dataclasses import dataclass, fields

from stableswap.curve.amp import AmpState
from stableswap.fees import Fees
from stableswap.safe_int import U64_MAX


@dataclass(frozen=True)
class ReserveSnapshot:
    """Reserves and LP supply of a pool at one instant.

    Attributes:
        reserve_a: Pool balance of asset A
        reserve_b: Pool balance of asset B
        pool_token_supply: Outstanding LP tokens
    """

    reserve_a: int
    reserve_b: int
    pool_token_supply: int = 0

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{field.name} must be an int")
            if not (0 <= value <= U64_MAX):
                raise ValueError(f"{field.name} must fit in u64: {value}")


@dataclass(frozen=True)
class PoolConfig:
    """Configuration of a pool that quotes are priced against.

    Attributes:
        amp: Amplification state
        fees: Fee schedule
    """

    amp: AmpState
    fees: Fees
