"""Numeric constants shared by the curve, fee and quote layers.

These are part of the arithmetic contract: changing any of them changes
quoted amounts for existing pools.
"""

from stableswap.safe_int import U64_MAX

# Number of assets in a pool
N_COINS = 2

# Bounds on the amplification coefficient (inclusive)
MIN_AMP = 1
MAX_AMP = 1_000_000

# Minimum time between ramp starts, and minimum ramp length (1 day)
MIN_RAMP_DURATION = 86_400

# A single ramp may scale the coefficient by at most this factor
MAX_A_CHANGE = 10

# Timestamp sentinel meaning "no ramp in effect"
ZERO_TS = 0

# Newton-Raphson iteration cap for both D and y
MAX_ITERATIONS = 256

# Size in bytes of the packed fee record
FEES_LEN = 64

__all__ = [
    "FEES_LEN",
    "MAX_AMP",
    "MAX_A_CHANGE",
    "MAX_ITERATIONS",
    "MIN_AMP",
    "MIN_RAMP_DURATION",
    "N_COINS",
    "U64_MAX",
    "ZERO_TS",
]
