"""Integer math primitives."""

from stableswap.math.wide_math import mul_div, mul_div_imbalanced

__all__ = ["mul_div", "mul_div_imbalanced"]
