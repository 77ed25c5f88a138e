"""Capability functionality: models, registry, declarations and operations."""

from borrowkit.core.capability.core import (
    CapabilityRegistry,
    conversion,
    copy_type,
    declare_borrow,
    declare_equivalence,
    fallible_conversion,
    get_registry,
)
from borrowkit.core.capability.models import (
    BlanketConversionMeta,
    BorrowError,
    BorrowMeta,
    ConversionError,
    ConversionMeta,
    Convertible,
    Droppable,
    Duplicable,
    DuplicableInto,
    EquivalenceError,
    EquivalenceMeta,
    EquivalenceViolation,
    NoConversionError,
)
from borrowkit.core.capability.operations import (
    as_mut,
    as_ref,
    convert,
    drop,
    duplicate,
    duplicate_into,
    from_,
    into,
    try_convert,
    try_from,
    try_into,
    verify_equivalence,
)

__all__ = [
    # Models
    "Duplicable",
    "DuplicableInto",
    "Droppable",
    "Convertible",
    "ConversionMeta",
    "BlanketConversionMeta",
    "BorrowMeta",
    "EquivalenceMeta",
    "ConversionError",
    "NoConversionError",
    "BorrowError",
    "EquivalenceError",
    "EquivalenceViolation",
    # Core
    "CapabilityRegistry",
    "get_registry",
    "conversion",
    "fallible_conversion",
    "declare_equivalence",
    "declare_borrow",
    "copy_type",
    # Operations
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
]
