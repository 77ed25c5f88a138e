"""Keyed lookup protocol for swappable associative containers.

A container implementing KeyedLookup stores owned keys of one type and
accepts, in every lookup, any view type declared equivalent to that key type.

Usage:
    table: KeyedLookup[Text, int] = EquivalentMap(Text)
    table.insert(Text("alpha"), 1)
    table.get_value("alpha")             # str view, no Text is built
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol

from borrowkit.core.hashing import HashStrategy


class KeyedLookup[K, V](Protocol):
    """Abstract keyed container. Implementations handle the actual buckets."""

    @property
    def key_type(self) -> type[K]:
        """Owned key type stored by the container."""
        ...

    @property
    def strategy(self) -> HashStrategy:
        """The single hash strategy applied to keys and every accepted view."""
        ...

    def insert(self, key: Any, value: V) -> V | None:
        """Store value under an owned key. Returns the previous value, if any."""
        ...

    def get_value(self, key: Any, default: V | None = None) -> V | None:
        """Look up by owned key or equivalent view without taking ownership."""
        ...

    def get_key_value(self, key: Any) -> tuple[K, V] | None:
        """Return the stored owned key and its value."""
        ...

    def remove(self, key: Any) -> V | None:
        """Remove by owned key or equivalent view. Returns the removed value."""
        ...

    def __contains__(self, key: object) -> bool:
        """Check membership by owned key or equivalent view."""
        ...

    def __len__(self) -> int:
        """Number of stored entries."""
        ...

    def __iter__(self) -> Iterator[K]:
        """Iterate stored owned keys."""
        ...
