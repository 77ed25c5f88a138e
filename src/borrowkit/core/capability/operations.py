"""Pure functions over declared capabilities.

Duplication, both directions of infallible and fallible conversion, direct
reference borrows, early release and equivalence verification.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, TypeVar, cast

from borrowkit.core.capability.core import CapabilityRegistry, get_registry
from borrowkit.core.capability.models import (
    BorrowError,
    ConversionError,
    Droppable,
    Duplicable,
    DuplicableInto,
    EquivalenceError,
    EquivalenceViolation,
    NoConversionError,
)
from borrowkit.core.hashing import HashStrategy, StableHashStrategy
from borrowkit.core.outcome import Err, Ok, Outcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_pydantic(value: Any) -> bool:
    """Check if value is a Pydantic model instance without importing pydantic."""
    for base in type(value).__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


# Duplication


def duplicate(value: T, registry: CapabilityRegistry | None = None) -> T:
    """Produce an independent copy of value.

    Tries in order:
    1. Copy-marked types: the value itself (immutable, bitwise-cheap)
    2. Duplicable.__duplicate__
    3. Pydantic models: model_copy(deep=True)
    4. copy.deepcopy

    Args:
        value: Value to duplicate.
        registry: Registry holding the copy marker table.

    Returns:
        Independent copy (or the value itself for copy types).
    """
    registry = registry or get_registry()
    if registry.is_copy(type(value)):
        return value
    if isinstance(value, Duplicable):
        return cast(T, value.__duplicate__())
    if _is_pydantic(value):
        return cast(T, value.model_copy(deep=True))  # type: ignore[attr-defined]
    return copy.deepcopy(value)


def duplicate_into(source: T, dest: T, registry: CapabilityRegistry | None = None) -> T:
    """Overwrite dest with a copy of source, reusing dest's storage when possible.

    Callers must use the returned object: for types that cannot be updated in
    place a fresh duplicate is returned instead of dest.

    Args:
        source: Value to copy from.
        dest: Existing destination value.
        registry: Registry holding the copy marker table.

    Returns:
        dest after overwriting, or a new duplicate of source.
    """
    if isinstance(dest, DuplicableInto) and type(dest) is type(source):
        source.__duplicate_into__(dest)  # type: ignore[attr-defined]
        return dest
    if isinstance(dest, list) and isinstance(source, list):
        dest[:] = copy.deepcopy(source)
        return dest
    if isinstance(dest, dict) and isinstance(source, dict):
        dest.clear()
        dest.update(copy.deepcopy(source))
        return dest
    if isinstance(dest, set) and isinstance(source, set):
        dest.clear()
        dest.update(copy.deepcopy(source))
        return dest
    if isinstance(dest, bytearray) and isinstance(source, bytes | bytearray):
        dest[:] = source
        return dest
    return duplicate(source, registry=registry)


# Infallible conversions


def convert(value: Any, target: type[T], registry: CapabilityRegistry | None = None) -> T:
    """Convert value into target through a declared infallible conversion.

    Instances of target convert to themselves (identity conversion).

    Args:
        value: Source value.
        target: Requested type.
        registry: Registry to consult (defaults to the global one).

    Returns:
        Converted value.

    Raises:
        NoConversionError: If no infallible conversion is declared.
    """
    if type(value) is target:
        return cast(T, value)
    fn = (registry or get_registry()).find_conversion(value, target)
    if fn is None:
        if isinstance(value, target):
            return value
        raise NoConversionError(
            f"No infallible conversion from {type(value).__name__} to {target.__name__}"
        )
    return cast(T, fn(value))


def from_(target: type[T], value: Any, registry: CapabilityRegistry | None = None) -> T:
    """Target-first spelling of convert(): from_(Text, "abc")."""
    return convert(value, target, registry=registry)


def into(value: Any, target: type[T], registry: CapabilityRegistry | None = None) -> T:
    """Source-first spelling of convert(): into("abc", Text)."""
    return convert(value, target, registry=registry)


# Fallible conversions


def try_convert(
    value: Any, target: type[T], registry: CapabilityRegistry | None = None
) -> Outcome[T, Any]:
    """Convert value into target, reporting failure as Err.

    Resolution order: declared fallible conversion, then any infallible
    conversion (always Ok), then identity.

    Args:
        value: Source value.
        target: Requested type.
        registry: Registry to consult (defaults to the global one).

    Returns:
        Ok(converted) or Err(failure). Never a partially converted value.

    Raises:
        NoConversionError: If neither a fallible nor an infallible conversion exists.
        TypeError: If a declared fallible conversion returns something other than Ok/Err.
    """
    registry = registry or get_registry()
    fn = registry.find_fallible(value, target)
    if fn is not None:
        try:
            outcome = fn(value)
        except ConversionError as failure:
            outcome = Err(failure)
        if not isinstance(outcome, Ok | Err):
            raise TypeError(
                f"Fallible conversion {fn!r} returned {type(outcome).__name__}, expected Ok or Err"
            )
        if outcome.is_err():
            logger.debug(
                "conversion %s -> %s failed: %s",
                type(value).__name__,
                target.__name__,
                outcome.error,
            )
        return outcome
    return Ok(convert(value, target, registry=registry))


def try_from(
    target: type[T], value: Any, registry: CapabilityRegistry | None = None
) -> Outcome[T, Any]:
    """Target-first spelling of try_convert(): try_from(I32, 7)."""
    return try_convert(value, target, registry=registry)


def try_into(
    value: Any, target: type[T], registry: CapabilityRegistry | None = None
) -> Outcome[T, Any]:
    """Source-first spelling of try_convert(): try_into(7, I32)."""
    return try_convert(value, target, registry=registry)


# Borrows


def as_ref(value: Any, target: type[T], registry: CapabilityRegistry | None = None) -> T:
    """Borrow value as target through a direct declaration.

    No chaining: use accepts_ref() for call-site resolution across several hops.

    Args:
        value: Source value.
        target: Requested view type.
        registry: Registry to consult.

    Returns:
        The value itself if already a target, else the declared view.

    Raises:
        BorrowError: If the source type declares no borrow as target.
    """
    if isinstance(value, target):
        return value
    meta = (registry or get_registry()).find_borrow(type(value), target)
    if meta is None:
        raise BorrowError(f"{type(value).__name__} does not borrow as {target.__name__}")
    return cast(T, meta.fn(value))


def as_mut(value: Any, target: type[T], registry: CapabilityRegistry | None = None) -> T:
    """Borrow value as a mutable target.

    Only declarations made with mutable=True qualify.

    Raises:
        BorrowError: If no mutable borrow is declared.
    """
    if isinstance(value, target):
        return value
    meta = (registry or get_registry()).find_borrow(type(value), target)
    if meta is None or not meta.mutable:
        raise BorrowError(f"{type(value).__name__} does not borrow mutably as {target.__name__}")
    return cast(T, meta.fn(value))


# Lifecycle


def drop(value: Any) -> None:
    """Give up ownership of value now instead of at end of scope.

    Droppable values release their resources through __drop__; for everything
    else the caller's reference simply ends here.
    """
    if isinstance(value, Droppable):
        value.__drop__()


# Verification


def verify_equivalence(
    owned: Any,
    view_type: type,
    strategy: HashStrategy | None = None,
    registry: CapabilityRegistry | None = None,
) -> Any:
    """Check the equivalence invariant for one owned sample.

    Derives a view with the declared projection and asserts equal hashes
    under strategy and equal comparison. If the pair declares to_owned, the
    round trip view → owned must also compare equal to the sample.

    Args:
        owned: Owned sample value.
        view_type: Declared view type.
        strategy: Hash strategy of the container that will rely on the pair.
        registry: Registry to consult.

    Returns:
        The derived view.

    Raises:
        EquivalenceError: If no equivalence is declared.
        EquivalenceViolation: If hashing or comparison disagree.
    """
    registry = registry or get_registry()
    strategy = strategy or StableHashStrategy()
    meta = registry.equivalence(type(owned), view_type)
    if meta is None:
        raise EquivalenceError(
            f"{type(owned).__name__} declares no equivalence with {view_type.__name__}"
        )
    view = meta.project(owned)
    if strategy.hash(view) != strategy.hash(owned):
        raise EquivalenceViolation(
            f"hash({view_type.__name__} view) != hash({type(owned).__name__}) for {owned!r}"
        )
    if meta.project(owned) != view:
        raise EquivalenceViolation(f"projection of {owned!r} is not stable")
    if meta.to_owned is not None and meta.make_owned(view, registry) != owned:
        raise EquivalenceViolation(f"{view!r} does not round-trip to {owned!r}")
    return view
