"""Utility modules for the money kernel."""

from money_kernel.utils.decimals import (
    ROUND_UNNECESSARY,
    ROUNDING_MODES,
    divide,
    from_unscaled,
    set_scale,
    strip_trailing_zeros,
    to_decimal,
    to_plain_string,
)

__all__ = [
    "ROUND_UNNECESSARY",
    "ROUNDING_MODES",
    "divide",
    "from_unscaled",
    "set_scale",
    "strip_trailing_zeros",
    "to_decimal",
    "to_plain_string",
]
