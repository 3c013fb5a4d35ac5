"""
Core math modules для tiered-tokens

Беззнаковая целочисленная арифметика с fail-closed семантикой.
"""

from tiered_tokens.core.math.checked_uint import (
    UINT256_MAX,
    UINT_BITS_DEFAULT,
    checked_add,
    checked_mul,
    checked_sub,
    fits_uint,
    require_uint,
    uint_max,
)

__all__ = [
    # Constants
    "UINT256_MAX",
    "UINT_BITS_DEFAULT",
    # Validation
    "require_uint",
    "fits_uint",
    "uint_max",
    # Checked operations
    "checked_add",
    "checked_sub",
    "checked_mul",
]
