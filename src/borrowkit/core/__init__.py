"""Core functionalities: stateless protocols, declarations and primitives.

Architecture Note:
    core/ contains the capability contracts and pure operations over them.
    For stateful holders and containers built on top, see cow/ and containers/.
"""

from borrowkit.core.capability import (
    BorrowError,
    CapabilityRegistry,
    ConversionError,
    Convertible,
    Droppable,
    Duplicable,
    DuplicableInto,
    EquivalenceError,
    EquivalenceMeta,
    EquivalenceViolation,
    NoConversionError,
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
    try_convert,
    try_from,
    try_into,
    verify_equivalence,
)
from borrowkit.core.coercion import CoercionError, CoercionPlan, accepts_ref, coerce, resolve_plan
from borrowkit.core.hashing import (
    Feedable,
    Hasher,
    HashStrategy,
    PythonHashStrategy,
    StableHasher,
    StableHashStrategy,
    stable_hash,
)
from borrowkit.core.outcome import (
    BoxedError,
    Describable,
    Err,
    Ok,
    Outcome,
    UnwrapError,
    propagates,
    widen,
)
from borrowkit.core.types import Owned, Ref

__all__ = [
    # Types
    "Ref",
    "Owned",
    # Outcome
    "Ok",
    "Err",
    "Outcome",
    "Describable",
    "UnwrapError",
    "BoxedError",
    "propagates",
    "widen",
    # Hashing
    "Hasher",
    "Feedable",
    "HashStrategy",
    "StableHasher",
    "StableHashStrategy",
    "PythonHashStrategy",
    "stable_hash",
    # Capability
    "CapabilityRegistry",
    "get_registry",
    "Duplicable",
    "DuplicableInto",
    "Droppable",
    "Convertible",
    "EquivalenceMeta",
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
    "CoercionPlan",
    "accepts_ref",
    "coerce",
    "resolve_plan",
]
