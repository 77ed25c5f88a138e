"""Keyed containers with equivalence-aware lookup."""

from borrowkit.containers.equivalent_map import EquivalentMap
from borrowkit.containers.protocol import KeyedLookup

__all__ = [
    "KeyedLookup",
    "EquivalentMap",
]
