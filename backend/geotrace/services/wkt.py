"""
Well-Known Text scanning helpers.

TextCursor walks a WKT string left to right; parsing functions return None
instead of raising when the text does not match.
"""

import re
from typing import Optional

from geotrace.services.coordinates import CoordinateKind

_WORD = re.compile(r"[A-Za-z]+")
_NUMBER = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?",
    re.IGNORECASE,
)


class TextCursor:
    """Position-tracking reader over a WKT string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def skip_blanks(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def consume(self, char: str) -> bool:
        """Skip blanks and consume `char` if it is next."""
        self.skip_blanks()
        if self.text.startswith(char, self.pos):
            self.pos += len(char)
            return True
        return False

    def read_word(self) -> str:
        self.skip_blanks()
        match = _WORD.match(self.text, self.pos)
        if not match:
            return ""
        self.pos = match.end()
        return match.group()

    def read_number(self) -> Optional[float]:
        self.skip_blanks()
        match = _NUMBER.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return float(match.group())


def read_geometry_tag(cursor: TextCursor, tag: str) -> Optional[CoordinateKind]:
    """
    Read a geometry tag such as ``LINESTRINGZM`` or ``LINESTRING ZM``.

    Returns the coordinate kind selected by the dimensional suffix, or None if
    the tag does not match.
    """
    word = cursor.read_word().upper()
    if not word.startswith(tag):
        return None

    suffix = word[len(tag):]
    if not suffix:
        # Suffix may be separated from the tag by blanks
        mark = cursor.pos
        following = cursor.read_word()
        if following and CoordinateKind.from_suffix(following) is not None:
            suffix = following
        else:
            cursor.pos = mark

    return CoordinateKind.from_suffix(suffix)


def format_number(value: float) -> str:
    """Shortest text that reads back to the same float."""
    return repr(float(value))
