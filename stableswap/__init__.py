"""Two-asset StableSwap invariant engine."""

from stableswap.quotes import (
    quote_deposit,
    quote_initialize,
    quote_swap,
    quote_withdraw,
    quote_withdraw_one,
)

__version__ = "0.1.0"
__all__ = [
    "quote_initialize",
    "quote_swap",
    "quote_deposit",
    "quote_withdraw",
    "quote_withdraw_one",
    "__version__",
]
