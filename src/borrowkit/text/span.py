"""Borrowed text span: a fat pointer (buffer, start, length) over UTF-8 bytes.

Usage:
    span = TextSpan.of("hello world")
    word = span[6:]                 # no copy
    owned = word.to_text()          # Text("world")
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from borrowkit.core.capability import Convertible, copy_type
from borrowkit.core.hashing import Hasher, stable_hash
from borrowkit.text.owned import Text, is_char_boundary


@copy_type
class TextSpan(Convertible):
    """Read-only view of a byte range inside a Text or bytes buffer.

    Spans never copy the underlying bytes. A span over a Text observes later
    edits to it; shrinking the Text below the span makes the span invalid.
    Duplicating a span shares the same range (spans are copy types).

    Args:
        base: Text or UTF-8 bytes the span points into.
        start: Byte offset of the first byte.
        length: Number of bytes (defaults to the rest of base).

    Raises:
        ValueError: If the range is out of bounds or splits a character.
    """

    __slots__ = ("_base", "_start", "_length")

    def __init__(self, base: Text | bytes, start: int = 0, length: int | None = None) -> None:
        data = self._data_of(base)
        if length is None:
            length = len(data) - start
        end = start + length
        if start < 0 or length < 0 or end > len(data):
            raise ValueError(f"span {start}..{end} out of bounds for {len(data)} bytes")
        if not (is_char_boundary(data, start) and is_char_boundary(data, end)):
            raise ValueError(f"span {start}..{end} does not fall on character boundaries")
        self._base = base
        self._start = start
        self._length = length

    @staticmethod
    def _data_of(base: Text | bytes) -> bytes | bytearray:
        if isinstance(base, Text):
            return base._buf
        return base

    @classmethod
    def of(cls, value: str) -> TextSpan:
        """Span over the UTF-8 encoding of a str."""
        return cls(value.encode("utf-8"))

    @property
    def start(self) -> int:
        return self._start

    @property
    def base(self) -> Text | bytes:
        return self._base

    @contextmanager
    def bytes_view(self) -> Iterator[memoryview]:
        """Yield a read-only memoryview of the spanned bytes, released on exit.

        Raises:
            ValueError: If the underlying Text shrank below the span.
        """
        data = self._data_of(self._base)
        end = self._start + self._length
        if end > len(data):
            raise ValueError("span points past the end of its text")
        with (
            memoryview(data) as whole,
            whole[self._start : end] as part,
            part.toreadonly() as view,
        ):
            yield view

    def to_text(self) -> Text:
        """Copy the spanned bytes into a new owned Text."""
        with self.bytes_view() as part:
            return Text._from_valid_utf8(part)

    def as_str(self) -> str:
        with self.bytes_view() as part:
            return str(part, "utf-8")

    def __getitem__(self, key: slice) -> TextSpan:
        """Sub-span by byte offsets relative to this span."""
        if not isinstance(key, slice):
            raise TypeError("TextSpan indices must be slices of byte offsets")
        start, stop, step = key.indices(self._length)
        if step != 1:
            raise ValueError("TextSpan slices cannot have a step")
        return TextSpan(self._base, self._start + start, max(stop - start, 0))

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return f"TextSpan({self.as_str()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            other = other.as_span()
        if not isinstance(other, TextSpan):
            return NotImplemented
        if self._length != other._length:
            return False
        with self.bytes_view() as mine, other.bytes_view() as theirs:
            return mine == theirs

    def __hash__(self) -> int:
        return stable_hash(self)

    def __feed__(self, hasher: Hasher) -> None:
        with self.bytes_view() as part:
            hasher.write_text_bytes(part)
