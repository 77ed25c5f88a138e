"""Hashing protocols shared by owned keys and their views.

A keyed container exposes exactly one HashStrategy. Every type that takes part
in an equivalence declaration must produce the same hash through that strategy
as the owned value it was derived from.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Hasher(Protocol):
    """Incremental hasher fed with canonical bytes."""

    def write(self, data: bytes | bytearray | memoryview) -> None: ...
    def write_text_bytes(self, data: bytes | bytearray | memoryview) -> None: ...
    def write_str(self, value: str) -> None: ...
    def write_int(self, value: int) -> None: ...
    def write_len(self, length: int) -> None: ...
    def finish(self) -> int: ...


@runtime_checkable
class Feedable(Protocol):
    """Opt-in hook: feed the value's canonical content into a hasher.

    Owned types and their views must feed identical byte streams.
    """

    def __feed__(self, hasher: Hasher) -> None: ...


@runtime_checkable
class HashStrategy(Protocol):
    """The single hash/compare strategy a keyed container applies to K and every Q."""

    def hash(self, value: Any) -> int: ...
