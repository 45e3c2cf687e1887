"""Source position tracking for tokens, values and error messages.

Provides the Position and Span dataclasses used throughout sexpstream.
Lines and columns are 1-indexed; offsets count UTF-8 bytes from 0, so
they stay meaningful when the input arrives as raw bytes.

Thread Safety:
Position and Span are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


def utf8_length(char: str) -> int:
    """Number of bytes ``char`` occupies when encoded as UTF-8."""
    code = ord(char)
    if code < 0x80:
        return 1
    if code < 0x800:
        return 2
    if code < 0x10000:
        return 3
    return 4


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A point in the input stream.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed, one per character)
        offset: Absolute byte offset in the UTF-8 encoded input (0-indexed)

    Examples:
        >>> pos = Position()
        >>> pos.advance("a")
        Position(line=1, column=2, offset=1)
        >>> pos.advance("\\n")
        Position(line=2, column=1, offset=1)
        >>> pos.advance("λ").offset
        2

    """

    line: int = 1
    column: int = 1
    offset: int = 0

    START: ClassVar[Position]

    def advance(self, char: str) -> Position:
        """Return the position just after consuming ``char``."""
        if char == "\n":
            return Position(self.line + 1, 1, self.offset + 1)
        return Position(self.line, self.column + 1, self.offset + utf8_length(char))

    def advance_text(self, text: str) -> Position:
        """Return the position after consuming every character of ``text``."""
        line = self.line
        column = self.column
        offset = self.offset
        for char in text:
            if char == "\n":
                line += 1
                column = 1
                offset += 1
            else:
                column += 1
                offset += utf8_length(char)
        return Position(line, column, offset)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


START = Position()
Position.START = START


@dataclass(frozen=True, slots=True)
class Span:
    """A source range, optionally tagged with the file it came from.

    Attributes:
        start: Position of the first character
        end: Position just past the last character
        source_file: Source file path (optional)

    """

    start: Position
    end: Position
    source_file: str | None = None

    def __str__(self) -> str:
        """Format for error messages: ``file.scm:10:5`` or ``10:5``."""
        if self.source_file:
            return f"{self.source_file}:{self.start}"
        return str(self.start)

    def span_to(self, end: Span) -> Span:
        """Create a span from this span's start to ``end``'s end."""
        return Span(self.start, end.end, self.source_file)

    @classmethod
    def at(cls, position: Position, source_file: str | None = None) -> Span:
        """Zero-width span at ``position``."""
        return cls(position, position, source_file)
