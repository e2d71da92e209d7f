"""Amplification policy configuration."""

from dataclasses import dataclass

from stableswap.constants import MAX_A_CHANGE, MAX_AMP, MIN_AMP, MIN_RAMP_DURATION


@dataclass(frozen=True)
class AmpPolicy:
    """Bounds applied when a pool is initialized or its coefficient is ramped.

    The curve math itself never reads these; they gate the administrative
    paths that produce an AmpState, so every state the solver sees already
    satisfies them.

    Attributes:
        min_amp: Smallest allowed amplification coefficient (default: 1)
        max_amp: Largest allowed amplification coefficient (default: 1,000,000)
        min_ramp_duration: Seconds a ramp must last, and the lock-out after
            a ramp starts before another may begin (default: 86,400)
        max_a_change: Maximum factor by which one ramp may raise or lower
            the coefficient (default: 10)
    """

    min_amp: int = MIN_AMP
    max_amp: int = MAX_AMP
    min_ramp_duration: int = MIN_RAMP_DURATION
    max_a_change: int = MAX_A_CHANGE

    def contains(self, amp_factor: int) -> bool:
        """True if amp_factor is within [min_amp, max_amp]."""
        return self.min_amp <= amp_factor <= self.max_amp


# Default policy instance
DEFAULT_AMP_POLICY = AmpPolicy()
