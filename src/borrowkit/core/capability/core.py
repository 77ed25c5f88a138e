"""Capability registry and declaration decorators.

Usage:
    @conversion(Celsius, Kelvin)
    def celsius_to_kelvin(value: Celsius) -> Kelvin:
        return Kelvin(value.degrees + 273.15)

    @fallible_conversion(int, Percent)
    def int_to_percent(value: int) -> Outcome[Percent, ConversionError]:
        if 0 <= value <= 100:
            return Ok(Percent(value))
        return Err(ConversionError(f"{value} is not a percentage"))

    declare_equivalence(Text, str, project=Text.as_str, to_owned=Text, default=True)
    declare_borrow(Text, memoryview, Text.as_bytes_view)

    @copy_type
    @dataclass(frozen=True, slots=True)
    class Point:
        x: int
        y: int
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from types import NoneType
from typing import Any, TypeVar, overload

from borrowkit.core.capability.models import (
    BlanketConversionMeta,
    BorrowMeta,
    ConversionMeta,
    EquivalenceError,
    EquivalenceMeta,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_BUILTIN_COPY_TYPES: tuple[type, ...] = (int, float, complex, bool, str, bytes, NoneType)


class CapabilityRegistry:
    """Process-local table of declared capabilities.

    Holds conversions (infallible, fallible, blanket), reference borrows,
    (owned, view) equivalences and the copy marker table. Lookups walk the
    value type's MRO, so declarations made for a base class cover subclasses,
    except for the copy marker which is exact per type.

    Args:
        with_builtins: Pre-register builtin copy types, bytes/memoryview
            declarations and the describable-failure → BoxedError widening.
    """

    def __init__(self, with_builtins: bool = True) -> None:
        """Initialize registry, optionally with builtin declarations."""
        self._conversions: dict[tuple[type, type], ConversionMeta] = {}
        self._fallible: dict[tuple[type, type], ConversionMeta] = {}
        self._blanket: list[BlanketConversionMeta] = []
        self._borrows: dict[tuple[type, type], BorrowMeta] = {}
        self._equivalences: dict[tuple[type, type], EquivalenceMeta] = {}
        self._default_views: dict[type, EquivalenceMeta] = {}
        self._owners: dict[type, list[EquivalenceMeta]] = {}
        self._copy_types: set[type] = set()
        self.plan_cache: dict[tuple[type, type, int], Any] = {}
        """Call-site coercion plans keyed by (source type, target, hop limit); cleared on new borrows."""
        if with_builtins:
            _register_builtins(self)

    # Conversions

    def register_conversion(
        self, source: type, target: type, fn: Callable[[Any], Any]
    ) -> ConversionMeta:
        """Declare a total conversion source → target.

        Args:
            source: Source type.
            target: Target type.
            fn: Conversion function. Must succeed for every source value.

        Returns:
            Conversion metadata.

        Raises:
            RuntimeError: If a different function is already declared for the pair.
        """
        return self._register(self._conversions, ConversionMeta(source, target, fn, False))

    def register_fallible(
        self, source: type, target: type, fn: Callable[[Any], Any]
    ) -> ConversionMeta:
        """Declare a partial conversion source → Outcome[target, failure].

        Args:
            source: Source type.
            target: Target type.
            fn: Function returning Ok(target) or Err(failure).

        Returns:
            Conversion metadata.

        Raises:
            RuntimeError: If a different function is already declared for the pair.
        """
        return self._register(self._fallible, ConversionMeta(source, target, fn, True))

    def _register(
        self, table: dict[tuple[type, type], ConversionMeta], meta: ConversionMeta
    ) -> ConversionMeta:
        key = (meta.source, meta.target)
        existing = table.get(key)
        if existing is not None:
            if existing.fn is meta.fn:
                return existing
            raise RuntimeError(
                f"Conversion conflict: {meta.source.__name__} -> {meta.target.__name__} "
                f"already declared by {existing.fn!r}"
            )
        table[key] = meta
        logger.debug(
            "registered %s conversion %s -> %s",
            "fallible" if meta.fallible else "infallible",
            meta.source.__qualname__,
            meta.target.__qualname__,
        )
        return meta

    def register_blanket(
        self,
        predicate: Callable[[Any], bool],
        target: type,
        fn: Callable[[Any], Any],
        fallible: bool = False,
    ) -> BlanketConversionMeta:
        """Declare a conversion into target for every value satisfying predicate.

        Explicit per-type declarations take precedence over blanket ones.

        Args:
            predicate: Value → whether this conversion applies.
            target: Target type.
            fn: Conversion function.
            fallible: Whether fn returns an Outcome.

        Returns:
            Blanket conversion metadata.
        """
        meta = BlanketConversionMeta(predicate, target, fn, fallible)
        self._blanket.append(meta)
        logger.debug("registered blanket conversion -> %s", target.__qualname__)
        return meta

    def find_conversion(self, value: Any, target: type) -> Callable[[Any], Any] | None:
        """Find the infallible conversion of value into target.

        Args:
            value: Source value.
            target: Requested type.

        Returns:
            Conversion function, or None if nothing is declared.
        """
        for base in type(value).__mro__:
            meta = self._conversions.get((base, target))
            if meta is not None:
                return meta.fn
        for blanket in self._blanket:
            if blanket.target is target and not blanket.fallible and blanket.predicate(value):
                return blanket.fn
        return None

    def find_fallible(self, value: Any, target: type) -> Callable[[Any], Any] | None:
        """Find the fallible conversion of value into target.

        Explicit fallible declarations win; infallible ones are not returned here.

        Args:
            value: Source value.
            target: Requested type.

        Returns:
            Function returning an Outcome, or None.
        """
        for base in type(value).__mro__:
            meta = self._fallible.get((base, target))
            if meta is not None:
                return meta.fn
        for blanket in self._blanket:
            if blanket.target is target and blanket.fallible and blanket.predicate(value):
                return blanket.fn
        return None

    def conversions(self) -> Iterator[ConversionMeta]:
        """Iterate all per-type conversion declarations, infallible first."""
        yield from self._conversions.values()
        yield from self._fallible.values()

    # Borrows

    def register_borrow(
        self, source: type, target: type, fn: Callable[[Any], Any], mutable: bool = False
    ) -> BorrowMeta:
        """Declare a cheap reference widening source → target.

        Args:
            source: Source type.
            target: Target type.
            fn: Function producing the target view without duplicating.
            mutable: Whether the produced view may be mutated by the caller.

        Returns:
            Borrow metadata.
        """
        meta = BorrowMeta(source, target, fn, mutable)
        self._borrows[(source, target)] = meta
        self.plan_cache.clear()
        logger.debug(
            "registered %s borrow %s -> %s",
            "mutable" if mutable else "shared",
            source.__qualname__,
            target.__qualname__,
        )
        return meta

    def find_borrow(self, source: type, target: type) -> BorrowMeta | None:
        """Find a direct borrow declaration, walking the source MRO."""
        for base in source.__mro__:
            meta = self._borrows.get((base, target))
            if meta is not None:
                return meta
        return None

    def borrows_from(self, source: type) -> list[BorrowMeta]:
        """List every shared borrow available to a source type, nearest base first."""
        found: list[BorrowMeta] = []
        seen: set[type] = set()
        for base in source.__mro__:
            for (src, tgt), meta in self._borrows.items():
                if src is base and tgt not in seen:
                    seen.add(tgt)
                    found.append(meta)
        return found

    # Equivalences

    def register_equivalence(
        self,
        owned_type: type,
        view_type: type,
        project: Callable[[Any], Any],
        to_owned: Callable[[Any], Any] | None = None,
        default: bool = False,
    ) -> EquivalenceMeta:
        """Declare that view_type hashes and compares identically to owned_type.

        The framework cannot check this claim; verify_equivalence() exists so
        test suites can.

        Args:
            owned_type: Owned key/value type.
            view_type: Borrowed view type.
            project: Owned value → view.
            to_owned: View → new owned value (needed for clone-on-write promotion).
            default: Make view_type the default view of owned_type.

        Returns:
            Equivalence metadata.
        """
        meta = EquivalenceMeta(owned_type, view_type, project, to_owned, default)
        self._equivalences[(owned_type, view_type)] = meta
        if default:
            self._default_views[owned_type] = meta
        if to_owned is not None and owned_type is not view_type:
            self._owners.setdefault(view_type, []).append(meta)
        logger.debug(
            "registered equivalence %s ~ %s%s",
            owned_type.__qualname__,
            view_type.__qualname__,
            " (default view)" if default else "",
        )
        return meta

    def equivalence(self, owned_type: type, view_type: type) -> EquivalenceMeta | None:
        """Look up the equivalence between owned_type and view_type.

        Returns:
            Declared metadata, the reflexive pair when the types match, or None.
        """
        for base in view_type.__mro__:
            meta = self._equivalences.get((owned_type, base))
            if meta is not None:
                return meta
        if issubclass(view_type, owned_type):
            return EquivalenceMeta.reflexive(owned_type)
        return None

    def has_views(self, owned_type: type) -> bool:
        """Check if owned_type, or one of its bases, declares any non-reflexive view."""
        return any(
            meta.owned_type in owned_type.__mro__ and not meta.is_reflexive
            for meta in self._equivalences.values()
        )

    def is_equivalent(self, owned_type: type, view_type: type) -> bool:
        """Check if view_type may stand in for owned_type in keyed lookups."""
        return self.equivalence(owned_type, view_type) is not None

    def equivalences(self) -> Iterator[EquivalenceMeta]:
        """Iterate every declared (non-implicit) equivalence."""
        yield from self._equivalences.values()

    def default_view(self, owned_type: type) -> EquivalenceMeta:
        """Return the default view pair of an owned type (reflexive if none declared)."""
        for base in owned_type.__mro__:
            meta = self._default_views.get(base)
            if meta is not None:
                return meta
        return EquivalenceMeta.reflexive(owned_type)

    def owner_of(self, view_type: type, owned_type: type | None = None) -> EquivalenceMeta:
        """Find the pair used to promote a view of view_type into an owned value.

        Args:
            view_type: Type of the borrowed view.
            owned_type: Explicit owned type, or None for the first declared owner.

        Returns:
            Equivalence metadata (reflexive when view_type has no declared owner).

        Raises:
            EquivalenceError: If owned_type is given but not declared for view_type.
        """
        if owned_type is not None:
            meta = self.equivalence(owned_type, view_type)
            if meta is None or (meta.to_owned is None and not meta.is_reflexive):
                raise EquivalenceError(
                    f"{owned_type.__name__} declares no owning equivalence with {view_type.__name__}"
                )
            return meta
        for base in view_type.__mro__:
            owners = self._owners.get(base)
            if owners:
                return owners[0]
        return EquivalenceMeta.reflexive(view_type)

    def is_view_type(self, tp: type) -> bool:
        """Check if tp is a declared borrowed view of some other owned type."""
        return any(base in self._owners for base in tp.__mro__)

    # Copy markers

    def mark_copy(self, cls: type) -> None:
        """Tag a type whose values are immutable and duplicated by identity."""
        self._copy_types.add(cls)

    def is_copy(self, cls: type) -> bool:
        """Check the copy marker for exactly this type (subclasses are not implied)."""
        return cls in self._copy_types


def _register_builtins(registry: CapabilityRegistry) -> None:
    """Declarations every registry starts with."""
    # Late import to avoid circular dependency
    from borrowkit.core.outcome.core import register_boxed_widening

    for cls in _BUILTIN_COPY_TYPES:
        registry.mark_copy(cls)

    registry.register_equivalence(bytes, memoryview, project=memoryview, to_owned=bytes)
    registry.register_borrow(bytes, memoryview, memoryview)
    registry.register_borrow(bytearray, memoryview, memoryview, mutable=True)
    register_boxed_widening(registry)


# Module-level registry instance
_registry = CapabilityRegistry()


def get_registry() -> CapabilityRegistry:
    """Access the global capability registry.

    Returns:
        The process-local CapabilityRegistry instance.
    """
    return _registry


def conversion(
    source: type, target: type, *, registry: CapabilityRegistry | None = None
) -> Callable[[F], F]:
    """Register the decorated function as the infallible conversion source → target.

    Args:
        source: Source type.
        target: Target type.
        registry: Registry to declare in (defaults to the global one).

    Returns:
        Decorator returning the function unchanged.
    """

    def decorator(fn: F) -> F:
        (registry or _registry).register_conversion(source, target, fn)
        return fn

    return decorator


def fallible_conversion(
    source: type, target: type, *, registry: CapabilityRegistry | None = None
) -> Callable[[F], F]:
    """Register the decorated function as the fallible conversion source → target.

    The function returns Ok(value) or Err(failure); a ConversionError raised
    inside it is reported as Err as well.

    Args:
        source: Source type.
        target: Target type.
        registry: Registry to declare in (defaults to the global one).

    Returns:
        Decorator returning the function unchanged.
    """

    def decorator(fn: F) -> F:
        (registry or _registry).register_fallible(source, target, fn)
        return fn

    return decorator


def declare_equivalence(
    owned_type: type,
    view_type: type,
    *,
    project: Callable[[Any], Any],
    to_owned: Callable[[Any], Any] | None = None,
    default: bool = False,
    registry: CapabilityRegistry | None = None,
) -> EquivalenceMeta:
    """Declare an (owned, view) equivalence in the given or global registry."""
    return (registry or _registry).register_equivalence(
        owned_type, view_type, project, to_owned, default
    )


def declare_borrow(
    source: type,
    target: type,
    fn: Callable[[Any], Any],
    *,
    mutable: bool = False,
    registry: CapabilityRegistry | None = None,
) -> BorrowMeta:
    """Declare a reference widening in the given or global registry."""
    return (registry or _registry).register_borrow(source, target, fn, mutable)


@overload
def copy_type(cls: type) -> type: ...


@overload
def copy_type(
    cls: None = None, *, registry: CapabilityRegistry | None = None
) -> Callable[[type], type]: ...


def copy_type(
    cls: type | None = None, *, registry: CapabilityRegistry | None = None
) -> type | Callable[[type], type]:
    """Mark a class as cheap to duplicate: values are shared instead of copied.

    Only apply to immutable types (frozen dataclasses, int subclasses, ...).

    Supports:
        @copy_type
        @copy_type()
        @copy_type(registry=my_registry)
    """

    def decorator(c: type) -> type:
        (registry or _registry).mark_copy(c)
        return c

    if cls is None:
        return decorator
    return decorator(cls)
