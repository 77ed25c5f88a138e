"""Stable hashing over a canonical byte feed.

Usage:
    hasher = StableHasher()
    hasher.write_str("abc")
    digest = hasher.finish()

    stable_hash("abc") == stable_hash(Text("abc"))  # True
"""

from __future__ import annotations

import hashlib
import struct
from typing import Any

from borrowkit.config import get_settings
from borrowkit.core.hashing.models import Feedable

# Terminates text content so ("ab", "c") and ("a", "bc") feed different streams.
_TEXT_TERMINATOR = b"\xff"


class StableHasher:
    """BLAKE2b-backed hasher producing process-independent hashes.

    Digest size and personalisation come from BorrowkitSettings unless given.

    Args:
        digest_size: Digest size in bytes (1..16).
        person: Personalisation string (at most 16 UTF-8 bytes).
    """

    __slots__ = ("_state",)

    def __init__(self, digest_size: int | None = None, person: str | None = None) -> None:
        settings = get_settings()
        self._state = hashlib.blake2b(
            digest_size=digest_size or settings.hash_digest_size,
            person=(person if person is not None else settings.hash_person).encode("utf-8"),
        )

    def write(self, data: bytes | bytearray | memoryview) -> None:
        """Feed raw bytes."""
        self._state.update(data)

    def write_len(self, length: int) -> None:
        """Feed a length prefix."""
        self._state.update(length.to_bytes(8, "little"))

    def write_text_bytes(self, data: bytes | bytearray | memoryview) -> None:
        """Feed UTF-8 encoded text content followed by the text terminator."""
        self._state.update(data)
        self._state.update(_TEXT_TERMINATOR)

    def write_str(self, value: str) -> None:
        """Feed a str exactly as its UTF-8 bytes would be fed."""
        self.write_text_bytes(value.encode("utf-8"))

    def write_int(self, value: int) -> None:
        """Feed an arbitrary-precision integer as length-prefixed two's complement."""
        size = (value.bit_length() + 8) // 8
        self.write_len(size)
        self._state.update(value.to_bytes(size, "little", signed=True))

    def finish(self) -> int:
        """Return the digest as an unsigned integer."""
        return int.from_bytes(self._state.digest(), "little")


def feed(value: Any, hasher: StableHasher) -> None:
    """Feed a value's canonical content into a hasher.

    Args:
        value: Value to feed. Feedable types use their own hook.
        hasher: Destination hasher.

    Raises:
        TypeError: If the value has no canonical byte representation.
    """
    if isinstance(value, Feedable):
        value.__feed__(hasher)
    elif isinstance(value, str):
        hasher.write_str(value)
    elif isinstance(value, bytes | bytearray | memoryview):
        view = memoryview(value).cast("B") if isinstance(value, memoryview) else value
        hasher.write_len(len(view))
        hasher.write(view)
    elif isinstance(value, int):
        # bool is an int subclass and compares equal to 0/1, so it hashes the same
        hasher.write_int(int(value))
    elif isinstance(value, float):
        if value.is_integer():
            hasher.write_int(int(value))
        else:
            hasher.write(struct.pack("<d", value))
    elif value is None:
        hasher.write(b"\x00")
    elif isinstance(value, tuple):
        hasher.write_len(len(value))
        for item in value:
            feed(item, hasher)
    elif isinstance(value, frozenset):
        hasher.write_len(len(value))
        for digest in sorted(stable_hash(item) for item in value):
            hasher.write_int(digest)
    else:
        raise TypeError(f"{type(value).__name__} has no stable hash representation")


def stable_hash(value: Any) -> int:
    """Hash a value through a fresh StableHasher.

    Args:
        value: Value to hash.

    Returns:
        Unsigned integer digest.
    """
    hasher = StableHasher()
    feed(value, hasher)
    return hasher.finish()


class StableHashStrategy:
    """Default container strategy: stable_hash for every key and view."""

    def hash(self, value: Any) -> int:
        return stable_hash(value)


class PythonHashStrategy:
    """Builtin hash(); only valid for pairs whose __hash__ already agrees (bytes/memoryview)."""

    def hash(self, value: Any) -> int:
        return hash(value)
