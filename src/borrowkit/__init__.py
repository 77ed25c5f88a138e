"""borrowkit: deferred ownership for Python values.

Clone-on-write cells, capability-based conversions and borrows, and keyed
containers that look up owned keys through cheap equivalent views.

Usage:
    from borrowkit import Cow, EquivalentMap, Text, I32, try_convert

    cell = Cow.borrowed("abc")
    cell.read()                  # "abc", nothing copied
    cell.write().push_str("d")   # duplicated once, now owned
    cell.read()                  # "abcd"

    table = EquivalentMap(Text, {Text("abc"): 1})
    table["abc"]                 # 1, no Text built for the lookup

    try_convert(2_000_000_000_000, I32).is_err()   # True
"""

__version__ = "0.1.0"

# Containers
from borrowkit.containers import EquivalentMap, KeyedLookup

# Core primitives
from borrowkit.core import (
    BorrowError,
    BoxedError,
    CapabilityRegistry,
    CoercionError,
    ConversionError,
    Convertible,
    Describable,
    Duplicable,
    DuplicableInto,
    EquivalenceError,
    EquivalenceViolation,
    Err,
    NoConversionError,
    Ok,
    Outcome,
    Owned,
    PythonHashStrategy,
    Ref,
    StableHashStrategy,
    accepts_ref,
    as_mut,
    as_ref,
    conversion,
    convert,
    copy_type,
    declare_borrow,
    declare_equivalence,
    drop,
    duplicate,
    duplicate_into,
    fallible_conversion,
    from_,
    get_registry,
    into,
    propagates,
    stable_hash,
    try_convert,
    try_from,
    try_into,
    verify_equivalence,
)

# Clone-on-write
from borrowkit.cow import Cow, CowState, MovedValueError

# Fixed-width integers
from borrowkit.numeric import I8, I16, I32, I64, U8, U16, U32, U64, FixedInt, TryFromIntError

# Text
from borrowkit.text import Text, TextSpan, Utf8Error

__all__ = [
    # Version
    "__version__",
    # Types
    "Ref",
    "Owned",
    # Outcome
    "Ok",
    "Err",
    "Outcome",
    "Describable",
    "BoxedError",
    "propagates",
    # Capability
    "CapabilityRegistry",
    "get_registry",
    "Duplicable",
    "DuplicableInto",
    "Convertible",
    "ConversionError",
    "NoConversionError",
    "BorrowError",
    "EquivalenceError",
    "EquivalenceViolation",
    "conversion",
    "fallible_conversion",
    "declare_equivalence",
    "declare_borrow",
    "copy_type",
    "duplicate",
    "duplicate_into",
    "convert",
    "from_",
    "into",
    "try_convert",
    "try_from",
    "try_into",
    "as_ref",
    "as_mut",
    "drop",
    "verify_equivalence",
    # Coercion
    "CoercionError",
    "accepts_ref",
    # Hashing
    "StableHashStrategy",
    "PythonHashStrategy",
    "stable_hash",
    # Clone-on-write
    "Cow",
    "CowState",
    "MovedValueError",
    # Containers
    "EquivalentMap",
    "KeyedLookup",
    # Text
    "Text",
    "TextSpan",
    "Utf8Error",
    # Fixed-width integers
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
]
