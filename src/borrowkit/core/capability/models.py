"""Capability models: protocols, declaration metadata and errors.

Capabilities are opt-in behavioural contracts. A type declares them either by
implementing a protocol hook (``__duplicate__``, ``__feed__``) or by being
registered in a CapabilityRegistry (conversions, borrows, equivalences).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from borrowkit.core.capability.core import CapabilityRegistry
    from borrowkit.core.outcome import Outcome


class NoConversionError(TypeError):
    """Raised when no declared conversion links a value to the requested type."""

    pass


class BorrowError(TypeError):
    """Raised when a type does not declare the requested borrow."""

    pass


class EquivalenceError(TypeError):
    """Raised when a lookup uses a view type that is not declared equivalent to the key type."""

    pass


class EquivalenceViolation(AssertionError):
    """A declared equivalence does not actually hash or compare consistently."""

    pass


class ConversionError(Exception):
    """Base class for failures reported by fallible conversions."""

    def describe(self) -> str:
        return str(self)


@runtime_checkable
class Duplicable(Protocol):
    """Value → independent copy of itself (possibly expensive)."""

    def __duplicate__(self) -> Self: ...


@runtime_checkable
class DuplicableInto(Protocol):
    """Overwrite an existing destination with a copy, reusing its storage."""

    def __duplicate_into__(self, dest: Self) -> None: ...


@runtime_checkable
class Droppable(Protocol):
    """Release held resources when ownership ends early."""

    def __drop__(self) -> None: ...


def _identity(value: Any) -> Any:
    return value


@dataclass(slots=True, frozen=True)
class ConversionMeta:
    """A declared conversion from source to target."""

    source: type
    target: type
    fn: Callable[[Any], Any]
    fallible: bool


@dataclass(slots=True, frozen=True)
class BlanketConversionMeta:
    """A conversion declared for every value satisfying a predicate."""

    predicate: Callable[[Any], bool]
    target: type
    fn: Callable[[Any], Any]
    fallible: bool


@dataclass(slots=True, frozen=True)
class BorrowMeta:
    """A cheap source → target reference widening.

    mutable is False when handing out a mutable target could break an
    invariant of the source (e.g. validated encoding).
    """

    source: type
    target: type
    fn: Callable[[Any], Any]
    mutable: bool = False


@dataclass(slots=True, frozen=True)
class EquivalenceMeta:
    """Declared (owned, view) pair that hashes and compares identically.

    Attributes:
        owned_type: Type of the owned value.
        view_type: Type of the borrowed view.
        project: Owned value → view without duplicating the owned value.
        to_owned: View → new owned value. None means duplicate() (reflexive pairs).
        default: Whether view_type is the owned type's default view.
    """

    owned_type: type
    view_type: type
    project: Callable[[Any], Any] = _identity
    to_owned: Callable[[Any], Any] | None = None
    default: bool = False

    @classmethod
    def reflexive(cls, tp: type) -> EquivalenceMeta:
        """Every type is equivalent to itself."""
        return cls(owned_type=tp, view_type=tp)

    @property
    def is_reflexive(self) -> bool:
        return self.owned_type is self.view_type

    def make_owned(self, view: Any, registry: CapabilityRegistry | None = None) -> Any:
        """Produce a new owned value from a view.

        Args:
            view: Borrowed view to duplicate.
            registry: Registry consulted for the copy marker table.

        Returns:
            Independent owned value.
        """
        if self.to_owned is not None:
            return self.to_owned(view)
        # Late import to avoid circular dependency
        from borrowkit.core.capability.operations import duplicate

        return duplicate(view, registry=registry)


class Convertible:
    """Mixin exposing registry conversions as methods in both call directions.

    Usage:
        class Text(Convertible): ...

        Text.from_("abc").into(str) == "abc"   # for registered conversions
        I32.try_from(2**40).is_err()
    """

    __slots__ = ()

    @classmethod
    def from_(cls, value: Any, registry: CapabilityRegistry | None = None) -> Self:
        from borrowkit.core.capability.operations import convert

        return convert(value, cls, registry=registry)

    @classmethod
    def try_from(cls, value: Any, registry: CapabilityRegistry | None = None) -> Outcome[Self, Any]:
        from borrowkit.core.capability.operations import try_convert

        return try_convert(value, cls, registry=registry)

    def into[T](self, target: type[T], registry: CapabilityRegistry | None = None) -> T:
        from borrowkit.core.capability.operations import convert

        return convert(self, target, registry=registry)

    def try_into[T](
        self, target: type[T], registry: CapabilityRegistry | None = None
    ) -> Outcome[T, Any]:
        from borrowkit.core.capability.operations import try_convert

        return try_convert(self, target, registry=registry)
