"""Clone-on-write cell: borrow first, own on first mutation.

Usage:
    def normalize(raw: str) -> Cow[str, Text]:
        cell = Cow.borrowed(raw)
        if raw.endswith(" "):
            cell.write().truncate(len(raw.rstrip().encode()))   # duplicates once
        return cell

    normalize("clean").is_borrowed    # True, nothing was copied
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any

from borrowkit.core.capability import CapabilityRegistry, EquivalenceMeta, duplicate, get_registry

logger = logging.getLogger(__name__)


class CowState(Enum):
    """The two states of a cell. BORROWED → OWNED is the only transition."""

    BORROWED = auto()  # holds a reference to someone else's view
    OWNED = auto()  # holds its own value


class MovedValueError(RuntimeError):
    """Raised when a consumed cell is used again."""

    pass


class Cow[V, O]:
    """Ownership-polymorphic holder over a view type V and owned type O.

    The (O, V) pair comes from the registry's equivalence declarations:
    project turns the owned value into a view for read(); to_owned turns the
    borrowed view into a new owned value on first write(). Without a
    declaration the cell is reflexive (V is O) and promotes via duplicate().

    Not safe for concurrent writers: guard shared cells externally.
    """

    __slots__ = ("_state", "_value", "_pair", "_registry", "_moved")

    def __init__(
        self,
        value: Any,
        state: CowState,
        pair: EquivalenceMeta,
        registry: CapabilityRegistry | None = None,
    ) -> None:
        """Wrap a value in the given state. Prefer borrowed()/owned()/from_()."""
        self._state = state
        self._value = value
        self._pair = pair
        self._registry = registry
        self._moved = False

    @classmethod
    def borrowed(
        cls,
        ref: V,
        owned_type: type | None = None,
        registry: CapabilityRegistry | None = None,
    ) -> Cow[V, O]:
        """Create a BORROWED cell over a reference.

        Args:
            ref: Borrowed view; never copied until write().
            owned_type: Owned type to promote into (defaults to the view
                type's first declared owner, or the view type itself).
            registry: Registry holding equivalence declarations.

        Raises:
            EquivalenceError: If owned_type declares no owning equivalence.
        """
        pair = (registry or get_registry()).owner_of(type(ref), owned_type)
        return cls(ref, CowState.BORROWED, pair, registry)

    @classmethod
    def owned(
        cls,
        value: O,
        view_type: type | None = None,
        registry: CapabilityRegistry | None = None,
    ) -> Cow[V, O]:
        """Create an OWNED cell.

        Args:
            value: Owned value; the cell takes it without copying.
            view_type: View returned by read() (defaults to the owned type's
                default view).
            registry: Registry holding equivalence declarations.

        Raises:
            EquivalenceError: If view_type is not declared equivalent.
        """
        reg = registry or get_registry()
        if view_type is None:
            pair = reg.default_view(type(value))
        else:
            pair = reg.owner_of(view_type, type(value))
        return cls(value, CowState.OWNED, pair, registry)

    @classmethod
    def from_(cls, value: Any, registry: CapabilityRegistry | None = None) -> Cow[Any, Any]:
        """Wrap any value in the matching state.

        A cell is returned unchanged; a declared view of another owned type
        (str, TextSpan, memoryview) is borrowed; anything else is owned.
        """
        if isinstance(value, Cow):
            return value
        if (registry or get_registry()).is_view_type(type(value)):
            return cls.borrowed(value, registry=registry)
        return cls.owned(value, registry=registry)

    def _check_alive(self) -> None:
        if self._moved:
            raise MovedValueError("Cow value was moved out by into_owned() or drop()")

    @property
    def state(self) -> CowState:
        self._check_alive()
        return self._state

    @property
    def is_borrowed(self) -> bool:
        return self.state is CowState.BORROWED

    @property
    def is_owned(self) -> bool:
        return self.state is CowState.OWNED

    @property
    def owned_type(self) -> type:
        return self._pair.owned_type

    @property
    def view_type(self) -> type:
        return self._pair.view_type

    def read(self) -> V:
        """Shared view of the current value, in either state. Never copies the owned value."""
        self._check_alive()
        if self._state is CowState.BORROWED:
            return self._value
        return self._pair.project(self._value)

    def _promote(self) -> None:
        owned = self._pair.make_owned(self._value, self._registry)
        logger.debug(
            "Cow promoted %s -> %s",
            self._pair.view_type.__qualname__,
            self._pair.owned_type.__qualname__,
        )
        self._value = owned
        self._state = CowState.OWNED

    def write(self) -> O:
        """Exclusive access to the owned value, duplicating a borrow at most once.

        Returns:
            The owned value; mutate it in place.
        """
        self._check_alive()
        if self._state is CowState.BORROWED:
            self._promote()
        return self._value

    def into_owned(self) -> O:
        """Consume the cell and return an owned value.

        BORROWED duplicates; OWNED hands over the stored value as is.
        The cell cannot be used afterwards.
        """
        self._check_alive()
        if self._state is CowState.BORROWED:
            self._promote()
        value = self._value
        self._release()
        return value

    def _release(self) -> None:
        self._value = None
        self._moved = True

    def __drop__(self) -> None:
        self._check_alive()
        self._release()

    def __duplicate__(self) -> Cow[V, O]:
        """Borrowed cells share the reference; owned cells duplicate their value."""
        self._check_alive()
        if self._state is CowState.BORROWED:
            return Cow(self._value, CowState.BORROWED, self._pair, self._registry)
        value = duplicate(self._value, registry=self._registry)
        return Cow(value, CowState.OWNED, self._pair, self._registry)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Cow):
            return self.read() == other.read()
        return self.read() == other

    # Mutable through write(), so unhashable like list and dict.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._moved:
            return "Cow(<moved>)"
        return f"Cow.{self._state.name.lower()}({self._value!r})"

    def __str__(self) -> str:
        return str(self.read())


def register_cow_conversion(registry: CapabilityRegistry) -> None:
    """Declare the blanket infallible conversion: any value → Cow."""
    registry.register_blanket(
        lambda value: True,
        Cow,
        lambda value: Cow.from_(value, registry=registry),
    )


register_cow_conversion(get_registry())
