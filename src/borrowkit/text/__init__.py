"""Owned text and its borrowed span, with their capability declarations.

Importing this package declares, in the global registry:
    equivalences  Text ~ str (default view), Text ~ TextSpan
    borrows       Text -> str, Text -> TextSpan, Text -> memoryview (read-only),
                  TextSpan -> str
    conversions   str -> Text, Text -> str, Text -> bytes, TextSpan -> Text,
                  str -> TextSpan, bytes -> Text (fallible)

Text has no mutable borrow as bytearray: its bytes must stay valid UTF-8.
"""

from borrowkit.core.capability import (
    conversion,
    declare_borrow,
    declare_equivalence,
    fallible_conversion,
)
from borrowkit.core.outcome import Outcome
from borrowkit.text.owned import Text, Utf8Error, is_char_boundary
from borrowkit.text.span import TextSpan

declare_equivalence(Text, str, project=Text.as_str, to_owned=Text, default=True)
declare_equivalence(Text, TextSpan, project=Text.as_span, to_owned=TextSpan.to_text)

declare_borrow(Text, str, Text.as_str)
declare_borrow(Text, TextSpan, Text.as_span)
declare_borrow(Text, memoryview, Text.as_bytes_view)
declare_borrow(TextSpan, str, TextSpan.as_str)

conversion(str, Text)(Text)
conversion(Text, str)(Text.as_str)
conversion(Text, bytes)(Text.to_bytes)
conversion(TextSpan, Text)(TextSpan.to_text)
conversion(str, TextSpan)(TextSpan.of)


@fallible_conversion(bytes, Text)
def _bytes_to_text(data: bytes) -> Outcome[Text, Utf8Error]:
    return Text.from_utf8(data)


__all__ = [
    "Text",
    "TextSpan",
    "Utf8Error",
    "is_char_boundary",
]
