"""Clone-on-write cell."""

from borrowkit.cow.cell import Cow, CowState, MovedValueError, register_cow_conversion

__all__ = [
    "Cow",
    "CowState",
    "MovedValueError",
    "register_cow_conversion",
]
