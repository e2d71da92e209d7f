"""Test helpers module for shared test utilities.

- constants: Common reserves, timestamps and fee schedules
- factories: Fee, amplification and reserve factory functions
- invariant: Exact residual of the invariant equation
"""

from tests.helpers.constants import (
    BALANCED_RESERVE,
    DEFAULT_AMP,
    FEE_DENOMINATOR,
    NOW,
    ONE_DAY,
)
from tests.helpers.factories import (
    make_config,
    make_fees,
    make_pool_payload,
    make_ramp,
    make_reserves,
)
from tests.helpers.invariant import invariant_residual

__all__ = [
    # Constants
    "BALANCED_RESERVE",
    "DEFAULT_AMP",
    "FEE_DENOMINATOR",
    "NOW",
    "ONE_DAY",
    # Factories
    "make_config",
    "make_fees",
    "make_pool_payload",
    "make_ramp",
    "make_reserves",
    # Reference math
    "invariant_residual",
]
