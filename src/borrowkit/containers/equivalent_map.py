"""Hash map whose lookups accept any view equivalent to the stored key type.

Separate chaining over a power-of-two bucket array. Entries remember their
hash, so resizing never rehashes keys.

Usage:
    names = EquivalentMap(Text)
    names[Text("ada")] = 1815
    names["ada"]                       # 1815, looked up through a str view
    names[TextSpan.of("ada lovelace")[:3]]   # 1815, through a span
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from borrowkit.core.capability import (
    CapabilityRegistry,
    EquivalenceError,
    EquivalenceMeta,
    get_registry,
)
from borrowkit.core.hashing import HashStrategy, PythonHashStrategy, StableHashStrategy

logger = logging.getLogger(__name__)

_MISSING: Any = object()


@dataclass(slots=True)
class _Entry[K, V]:
    hash: int
    key: K
    value: V


class EquivalentMap[K, V](MutableMapping[K, V]):
    """Mutable mapping over owned keys of key_type.

    Lookups (``m[q]``, ``get``, ``in``, ``get_key_value``, ``del``, ``pop``)
    accept a q of any type declared equivalent to key_type. The query is
    hashed with the map's strategy and compared as ``project(stored) == q``;
    no owned key is constructed. A q of an undeclared type raises
    EquivalenceError before anything is hashed.

    Insertion takes an owned key; a declared view is turned into one through
    the pair's to_owned.

    Args:
        key_type: Owned key type.
        items: Initial (key, value) pairs or mapping.
        strategy: Hash strategy shared by key_type and every accepted view.
            Defaults to StableHashStrategy when key_type declares views at
            construction time, and to PythonHashStrategy otherwise.
        registry: Registry holding equivalence declarations.
    """

    _INITIAL_BUCKETS = 8
    _MAX_LOAD = 0.75

    def __init__(
        self,
        key_type: type[K],
        items: Mapping[Any, V] | Iterable[tuple[Any, V]] | None = None,
        *,
        strategy: HashStrategy | None = None,
        registry: CapabilityRegistry | None = None,
    ) -> None:
        self._key_type = key_type
        self._registry = registry or get_registry()
        if strategy is None:
            strategy = (
                StableHashStrategy()
                if self._registry.has_views(key_type)
                else PythonHashStrategy()
            )
        self._strategy: HashStrategy = strategy
        self._buckets: list[list[_Entry[K, V]]] = [[] for _ in range(self._INITIAL_BUCKETS)]
        self._len = 0
        self._pairs: dict[type, EquivalenceMeta] = {}
        if items is not None:
            self.update(items)

    @property
    def key_type(self) -> type[K]:
        return self._key_type

    @property
    def strategy(self) -> HashStrategy:
        return self._strategy

    def _pair_for(self, query_type: type) -> EquivalenceMeta:
        meta = self._pairs.get(query_type)
        if meta is None:
            meta = self._registry.equivalence(self._key_type, query_type)
            if meta is None:
                raise EquivalenceError(
                    f"{query_type.__name__} is not declared equivalent to "
                    f"{self._key_type.__name__}; cannot use it as a lookup key"
                )
            self._pairs[query_type] = meta
        return meta

    def _bucket(self, key_hash: int) -> list[_Entry[K, V]]:
        return self._buckets[key_hash & (len(self._buckets) - 1)]

    def _find(self, query: Any) -> tuple[list[_Entry[K, V]], int, int]:
        """Locate an entry by owned key or equivalent view.

        Returns:
            (bucket, index, hash) with index -1 if absent.
        """
        meta = self._pair_for(type(query))
        key_hash = self._strategy.hash(query)
        bucket = self._bucket(key_hash)
        for index, entry in enumerate(bucket):
            if entry.hash == key_hash and meta.project(entry.key) == query:
                return bucket, index, key_hash
        return bucket, -1, key_hash

    def _own_key(self, key: Any) -> K:
        if isinstance(key, self._key_type):
            return key
        meta = self._pair_for(type(key))
        if meta.to_owned is None:
            raise EquivalenceError(
                f"{type(key).__name__} cannot be turned into an owned {self._key_type.__name__} key"
            )
        return meta.make_owned(key, self._registry)

    def _grow(self) -> None:
        size = len(self._buckets) * 2
        buckets: list[list[_Entry[K, V]]] = [[] for _ in range(size)]
        for bucket in self._buckets:
            for entry in bucket:
                buckets[entry.hash & (size - 1)].append(entry)
        self._buckets = buckets
        logger.debug("EquivalentMap grew to %d buckets for %d entries", size, self._len)

    def insert(self, key: Any, value: V) -> V | None:
        """Store value, returning the value previously stored under an equal key.

        An existing entry keeps its original key object.
        """
        owned = self._own_key(key)
        bucket, index, key_hash = self._find(owned)
        if index >= 0:
            previous = bucket[index].value
            bucket[index].value = value
            return previous
        bucket.append(_Entry(key_hash, owned, value))
        self._len += 1
        if self._len > len(self._buckets) * self._MAX_LOAD:
            self._grow()
        return None

    def get_value(self, key: Any, default: V | None = None) -> V | None:
        bucket, index, _ = self._find(key)
        return bucket[index].value if index >= 0 else default

    def get_key_value(self, key: Any) -> tuple[K, V] | None:
        bucket, index, _ = self._find(key)
        if index < 0:
            return None
        entry = bucket[index]
        return entry.key, entry.value

    def remove(self, key: Any) -> V | None:
        bucket, index, _ = self._find(key)
        if index < 0:
            return None
        self._len -= 1
        return bucket.pop(index).value

    def __getitem__(self, key: Any) -> V:
        bucket, index, _ = self._find(key)
        if index < 0:
            raise KeyError(key)
        return bucket[index].value

    def __setitem__(self, key: Any, value: V) -> None:
        self.insert(key, value)

    def __delitem__(self, key: Any) -> None:
        bucket, index, _ = self._find(key)
        if index < 0:
            raise KeyError(key)
        del bucket[index]
        self._len -= 1

    def __contains__(self, key: object) -> bool:
        return self._find(key)[1] >= 0

    def get(self, key: Any, default: Any = None) -> Any:
        return self.get_value(key, default)

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        bucket, index, _ = self._find(key)
        if index < 0:
            if default is _MISSING:
                raise KeyError(key)
            return default
        self._len -= 1
        return bucket.pop(index).value

    def __iter__(self) -> Iterator[K]:
        for bucket in self._buckets:
            for entry in bucket:
                yield entry.key

    def __len__(self) -> int:
        return self._len

    def clear(self) -> None:
        self._buckets = [[] for _ in range(self._INITIAL_BUCKETS)]
        self._len = 0

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"EquivalentMap[{self._key_type.__name__}]({{{body}}})"
