"""Fixed-width integer types with lossless and checked conversions.

Usage:
    I64(2_000_000_000_000).try_into(I32)     # Err(TryFromIntError(...))
    I16.from_(U8(200))                       # I16(200), always lossless
    I32.wrapping(2_000_000_000_000)          # explicit two's complement truncation
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar, Self

from borrowkit.core.capability import (
    CapabilityRegistry,
    ConversionError,
    Convertible,
    get_registry,
)
from borrowkit.core.outcome import Err, Ok, Outcome


class TryFromIntError(ConversionError):
    """An integer does not fit the requested fixed-width type.

    Attributes:
        value: The rejected integer.
        target: The fixed-width type that could not represent it.
    """

    def __init__(self, value: int, target: type[FixedInt]) -> None:
        super().__init__(
            f"out of range integral type conversion attempted: {value} does not fit "
            f"{target.__name__} [{target.MIN}, {target.MAX}]"
        )
        self.value = value
        self.target = target


class FixedInt(int, Convertible):
    """Base for fixed-width integers.

    Construction validates the range and raises OverflowError; use
    try_from()/try_convert() for a recoverable check. Arithmetic results are
    plain ints: re-wrap them to keep the width guarantee.
    """

    __slots__ = ()

    BITS: ClassVar[int]
    SIGNED: ClassVar[bool]
    MIN: ClassVar[int]
    MAX: ClassVar[int]

    def __init_subclass__(cls, *, bits: int, signed: bool, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls.BITS = bits
        cls.SIGNED = signed
        cls.MIN = -(1 << (bits - 1)) if signed else 0
        cls.MAX = (1 << (bits - 1)) - 1 if signed else (1 << bits) - 1

    def __new__(cls, value: int = 0) -> Self:
        if not isinstance(value, int):
            raise TypeError(f"{cls.__name__} requires an int, got {type(value).__name__}")
        if not cls.MIN <= value <= cls.MAX:
            raise OverflowError(f"{value} out of range for {cls.__name__}")
        return super().__new__(cls, value)

    @classmethod
    def contains(cls, value: int) -> bool:
        return cls.MIN <= value <= cls.MAX

    @classmethod
    def wrapping(cls, value: int) -> Self:
        """Truncate to the low BITS bits, two's complement. Lossy by request only."""
        wrapped = value & ((1 << cls.BITS) - 1)
        if cls.SIGNED and wrapped > cls.MAX:
            wrapped -= 1 << cls.BITS
        return cls(wrapped)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


class I8(FixedInt, bits=8, signed=True):
    __slots__ = ()


class I16(FixedInt, bits=16, signed=True):
    __slots__ = ()


class I32(FixedInt, bits=32, signed=True):
    __slots__ = ()


class I64(FixedInt, bits=64, signed=True):
    __slots__ = ()


class U8(FixedInt, bits=8, signed=False):
    __slots__ = ()


class U16(FixedInt, bits=16, signed=False):
    __slots__ = ()


class U32(FixedInt, bits=32, signed=False):
    __slots__ = ()


class U64(FixedInt, bits=64, signed=False):
    __slots__ = ()


FIXED_TYPES: tuple[type[FixedInt], ...] = (I8, I16, I32, I64, U8, U16, U32, U64)


def is_lossless(source: type[FixedInt], target: type[FixedInt]) -> bool:
    """Check if every source value is representable in target."""
    return target.MIN <= source.MIN and source.MAX <= target.MAX


def checked(target: type[FixedInt]) -> Callable[[int], Outcome[FixedInt, TryFromIntError]]:
    """Build the range-checked conversion of any int into target."""

    def check(value: int) -> Outcome[FixedInt, TryFromIntError]:
        if target.contains(value):
            return Ok(target(value))
        return Err(TryFromIntError(int(value), target))

    check.__name__ = check.__qualname__ = f"checked_{target.__name__.lower()}"
    return check


def register_fixed_conversions(registry: CapabilityRegistry) -> None:
    """Declare copy markers and every fixed-width conversion in a registry.

    Lossless widenings and fixed → int are infallible; int → fixed and any
    narrowing are fallible with TryFromIntError.
    """
    for target in FIXED_TYPES:
        registry.mark_copy(target)
        registry.register_conversion(target, int, int)
        registry.register_fallible(int, target, checked(target))
        for source in FIXED_TYPES:
            if source is target:
                continue
            if is_lossless(source, target):
                registry.register_conversion(source, target, target)
            else:
                registry.register_fallible(source, target, checked(target))


register_fixed_conversions(get_registry())
