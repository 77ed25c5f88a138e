"""Owned, growable UTF-8 text buffer.

Usage:
    text = Text("abc")
    text.push_str("def")
    span = text.as_span()[1:4]        # TextSpan over b"bcd", no copy
    assert span == Text("bcd")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from borrowkit.core.capability import ConversionError, Convertible
from borrowkit.core.hashing import Hasher, stable_hash
from borrowkit.core.outcome import Err, Ok, Outcome

if TYPE_CHECKING:
    from borrowkit.text.span import TextSpan


class Utf8Error(ConversionError):
    """Bytes are not valid UTF-8.

    Attributes:
        valid_up_to: Length of the longest valid UTF-8 prefix.
    """

    def __init__(self, valid_up_to: int, reason: str) -> None:
        super().__init__(f"invalid utf-8 sequence at byte {valid_up_to}: {reason}")
        self.valid_up_to = valid_up_to


def is_char_boundary(data: bytes | bytearray, index: int) -> bool:
    """Check if a byte offset falls between UTF-8 code points."""
    if index == 0 or index == len(data):
        return True
    if not 0 < index < len(data):
        return False
    return (data[index] & 0xC0) != 0x80


class Text(Convertible):
    """Owned, mutable text stored as validated UTF-8 bytes.

    Lengths and offsets are in bytes. Text hashes through the stable hasher so
    that str and TextSpan views hash identically under StableHashStrategy.
    Mutating a Text used as a container key corrupts that container.

    Args:
        value: Initial content.
    """

    __slots__ = ("_buf",)

    def __init__(self, value: str = "") -> None:
        self._buf = bytearray(value.encode("utf-8"))

    @classmethod
    def _from_valid_utf8(cls, data: bytes | bytearray | memoryview) -> Text:
        text = cls.__new__(cls)
        text._buf = bytearray(data)
        return text

    @classmethod
    def from_utf8(cls, data: bytes | bytearray | memoryview) -> Outcome[Text, Utf8Error]:
        """Validate bytes and take them as text.

        Returns:
            Ok(Text) or Err(Utf8Error) carrying the valid prefix length.
        """
        try:
            bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            return Err(Utf8Error(exc.start, exc.reason))
        return Ok(cls._from_valid_utf8(data))

    def push(self, char: str) -> None:
        """Append a single character."""
        if len(char) != 1:
            raise ValueError(f"push() takes a single character, got {len(char)}")
        self._buf += char.encode("utf-8")

    def push_str(self, value: str | Text | TextSpan) -> None:
        """Append text from a str, another Text or a span."""
        if isinstance(value, str):
            self._buf += value.encode("utf-8")
        elif isinstance(value, Text):
            self._buf += bytes(value._buf) if value is self else value._buf
        else:
            with value.bytes_view() as part:
                # copy first: the span may point into this very buffer
                data = bytes(part)
            self._buf += data

    def truncate(self, new_len: int) -> None:
        """Shorten to new_len bytes; no effect if already shorter.

        Raises:
            ValueError: If new_len does not fall on a character boundary.
        """
        if new_len >= len(self._buf):
            return
        if not is_char_boundary(self._buf, new_len):
            raise ValueError(f"byte {new_len} is not a character boundary")
        del self._buf[new_len:]

    def clear(self) -> None:
        self._buf.clear()

    def as_str(self) -> str:
        return self._buf.decode("utf-8")

    def as_span(self) -> TextSpan:
        """Borrow the whole text as a span without copying."""
        from borrowkit.text.span import TextSpan

        return TextSpan(self, 0, len(self._buf))

    def as_bytes_view(self) -> memoryview:
        """Borrow the UTF-8 bytes read-only.

        While the view is alive the buffer cannot change size.
        """
        return memoryview(self._buf).toreadonly()

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __bool__(self) -> bool:
        return bool(self._buf)

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return f"Text({self.as_str()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            return self._buf == other._buf
        from borrowkit.text.span import TextSpan

        if isinstance(other, TextSpan):
            return other == self
        return NotImplemented

    def __hash__(self) -> int:
        return stable_hash(self)

    def __feed__(self, hasher: Hasher) -> None:
        hasher.write_text_bytes(self._buf)

    def __duplicate__(self) -> Text:
        return Text._from_valid_utf8(self._buf)

    def __duplicate_into__(self, dest: Text) -> None:
        dest._buf[:] = self._buf
