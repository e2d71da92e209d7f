"""Amplification coefficient and its time-weighted ramp.

A pool's coefficient moves linearly from initial_amp_factor to
target_amp_factor between start_ramp_ts and stop_ramp_ts. Outside that
window, or when no ramp is configured, the target applies.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from stableswap.config import DEFAULT_AMP_POLICY, AmpPolicy
from stableswap.constants import ZERO_TS
from stableswap.errors import InsufficientRampTime, InvalidInput, RampLocked

logger = structlog.get_logger()


@dataclass(frozen=True)
class AmpState:
    """Amplification state of a pool.

    Attributes:
        initial_amp_factor: Coefficient at start_ramp_ts
        target_amp_factor: Coefficient at and after stop_ramp_ts
        start_ramp_ts: Unix timestamp the ramp began
        stop_ramp_ts: Unix timestamp the ramp ends (ZERO_TS for no ramp)
    """

    initial_amp_factor: int
    target_amp_factor: int
    start_ramp_ts: int = ZERO_TS
    stop_ramp_ts: int = ZERO_TS

    def __post_init__(self) -> None:
        if self.initial_amp_factor < 0 or self.target_amp_factor < 0:
            raise ValueError("Amplification coefficients must be non-negative")
        if self.stop_ramp_ts < self.start_ramp_ts:
            raise ValueError(
                f"stop_ramp_ts {self.stop_ramp_ts} is before start_ramp_ts {self.start_ramp_ts}"
            )

    @classmethod
    def fixed(cls, amp_factor: int) -> AmpState:
        """State with no ramp: initial == target, start == stop == ZERO_TS."""
        return cls(amp_factor, amp_factor, ZERO_TS, ZERO_TS)

    @property
    def is_ramping(self) -> bool:
        return self.start_ramp_ts != self.stop_ramp_ts


def compute_amp_factor(state: AmpState, now: int) -> int:
    """Effective amplification coefficient at a point in time.

    Linear interpolation between the initial and target coefficients over
    [start_ramp_ts, stop_ramp_ts], rounding the moved distance down, so the
    result never overshoots the target in either direction.

    Args:
        state: The pool's amplification state
        now: Current unix timestamp

    Returns:
        The coefficient in effect at now
    """
    if not state.is_ramping or now >= state.stop_ramp_ts or now < state.start_ramp_ts:
        return state.target_amp_factor

    time_range = state.stop_ramp_ts - state.start_ramp_ts
    time_delta = now - state.start_ramp_ts

    if state.target_amp_factor >= state.initial_amp_factor:
        amp_range = state.target_amp_factor - state.initial_amp_factor
        return state.initial_amp_factor + amp_range * time_delta // time_range

    amp_range = state.initial_amp_factor - state.target_amp_factor
    return state.initial_amp_factor - amp_range * time_delta // time_range


def ramp_amp(
    state: AmpState,
    target_amp: int,
    stop_ramp_ts: int,
    now: int,
    policy: AmpPolicy | None = None,
) -> AmpState:
    """Start a new ramp from the current effective coefficient.

    Args:
        state: Current amplification state
        target_amp: Coefficient to reach at stop_ramp_ts
        stop_ramp_ts: When the ramp ends
        now: Current unix timestamp, becomes the new start_ramp_ts
        policy: Bounds to enforce. Uses DEFAULT_AMP_POLICY if not provided.

    Returns:
        The new amplification state

    Raises:
        RampLocked: If the previous ramp started less than
            min_ramp_duration ago
        InsufficientRampTime: If the ramp would last less than
            min_ramp_duration
        InvalidInput: If target_amp is out of bounds or moves the
            coefficient by more than max_a_change in either direction
    """
    policy = policy or DEFAULT_AMP_POLICY

    if now < state.start_ramp_ts + policy.min_ramp_duration:
        raise RampLocked(
            f"Ramp locked until {state.start_ramp_ts + policy.min_ramp_duration}, now {now}"
        )
    if stop_ramp_ts < now + policy.min_ramp_duration:
        raise InsufficientRampTime(
            f"Ramp must last at least {policy.min_ramp_duration}s, stop {stop_ramp_ts} now {now}"
        )
    if not policy.contains(target_amp):
        raise InvalidInput(
            f"Target amp {target_amp} outside [{policy.min_amp}, {policy.max_amp}]"
        )

    current_amp = compute_amp_factor(state, now)
    if (target_amp >= current_amp and target_amp > current_amp * policy.max_a_change) or (
        target_amp < current_amp and target_amp * policy.max_a_change < current_amp
    ):
        raise InvalidInput(
            f"Target amp {target_amp} moves current {current_amp} by more than "
            f"{policy.max_a_change}x"
        )

    logger.info(
        "ramp_started",
        initial_amp=current_amp,
        target_amp=target_amp,
        start_ramp_ts=now,
        stop_ramp_ts=stop_ramp_ts,
    )
    return AmpState(current_amp, target_amp, now, stop_ramp_ts)


def stop_ramp_amp(state: AmpState, now: int) -> AmpState:
    """Freeze the coefficient at its current effective value."""
    current_amp = compute_amp_factor(state, now)
    logger.info("ramp_stopped", amp=current_amp, ts=now)
    return AmpState(current_amp, current_amp, now, now)
