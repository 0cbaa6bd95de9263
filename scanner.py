"""
scanner.py - Position-tracked cursor over an immutable JSON byte buffer.

Decodes one Unicode scalar at a time. ASCII bytes map straight to their
character; anything else is decoded as UTF-8, and a malformed sequence
degrades to the single raw byte instead of failing.
"""

from typing import Iterator, NamedTuple, Tuple

# Sequence length announced by a UTF-8 lead byte, keyed on its high bits.
_UTF8_LEAD = (
    (0xE0, 0xC0, 2),
    (0xF0, 0xE0, 3),
    (0xF8, 0xF0, 4),
)


class Position(NamedTuple):
    """Cursor snapshot: byte offset, 1-based line, 0-based column."""
    offset: int
    line: int
    column: int


def _sequence_length(lead: int) -> int:
    for mask, marker, length in _UTF8_LEAD:
        if lead & mask == marker:
            return length
    return 1


class Scanner:
    """
    Read-only cursor over ``data``.

    The column counts scalars, not bytes, and resets to 0 after a newline.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.offset = 0
        self.line = 1
        self.column = 0

    def at_end(self) -> bool:
        return self.offset >= len(self.data)

    @property
    def position(self) -> Position:
        return Position(self.offset, self.line, self.column)

    def peek(self) -> Tuple[str, int]:
        """Return the next scalar and its width in bytes without advancing."""
        if self.at_end():
            return "", 0
        lead = self.data[self.offset]
        if lead < 0x80:
            return chr(lead), 1

        length = _sequence_length(lead)
        chunk = self.data[self.offset:self.offset + length]
        if length > 1 and len(chunk) == length:
            try:
                return chunk.decode("utf-8"), length
            except UnicodeDecodeError:
                pass
        # illegal encoding
        return chr(lead), 1

    def read(self) -> str:
        scalar, width = self.peek()
        if not width:
            return scalar
        if scalar == "\n":
            self.column = 0
            self.line += 1
        else:
            self.column += 1
        self.offset += width
        return scalar


def scan(data: bytes) -> Iterator[Tuple[str, Position]]:
    """Yield every scalar of ``data`` with the position it starts at."""
    scanner = Scanner(data)
    while not scanner.at_end():
        pos = scanner.position
        yield scanner.read(), pos
