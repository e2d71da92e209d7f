"""StableSwap curve: amplification ramp, invariant solver and pool calculator.

The math functions take the effective amplification coefficient directly;
StableSwap binds an AmpState and a timestamp so callers do not have to
resolve the ramp themselves.
"""

from .amp import AmpState, compute_amp_factor, ramp_amp, stop_ramp_amp
from .stable_math import compute_d, compute_output_for_input, compute_y, compute_y_raw
from .stable_swap import StableSwap, SwapResult

__all__ = [
    # Amplification
    "AmpState",
    "compute_amp_factor",
    "ramp_amp",
    "stop_ramp_amp",
    # Invariant math
    "compute_d",
    "compute_y",
    "compute_y_raw",
    "compute_output_for_input",
    # Pool calculator
    "StableSwap",
    "SwapResult",
]
