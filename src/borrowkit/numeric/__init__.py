"""Fixed-width integers and their conversion declarations."""

from borrowkit.numeric.fixed import (
    FIXED_TYPES,
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    FixedInt,
    TryFromIntError,
    checked,
    is_lossless,
    register_fixed_conversions,
)

__all__ = [
    "FixedInt",
    "TryFromIntError",
    "I8",
    "I16",
    "I32",
    "I64",
    "U8",
    "U16",
    "U32",
    "U64",
    "FIXED_TYPES",
    "checked",
    "is_lossless",
    "register_fixed_conversions",
]
