"""Token and TokenType definitions for the sexpstream tokenizer.

The tokenizer produces a stream of Token objects that the parser consumes
and the printer produces for output. Each Token has a type, a string
value, and the start/end positions of its source text.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType and the kind enums are inherently immutable.

"""

from dataclasses import dataclass
from enum import Enum, auto

from sexpstream.location import Position, Span


class TokenType(Enum):
    """Token types produced by the tokenizer.

    The value stored on a Token depends on its type:
    - OPEN/CLOSE/QUOTE/DATUM_COMMENT: the literal source text
    - ATOM: the raw lexeme (classified later by the parser)
    - STRING/SYMBOL/KEYWORD: the decoded content, without delimiters
    - CHAR: the decoded character
    - COMMENT/WHITESPACE: the raw source text

    """

    OPEN = auto()  # ( [ { #(
    CLOSE = auto()  # ) ] }
    ATOM = auto()  # symbol, number, boolean, or "."
    STRING = auto()  # "..."
    SYMBOL = auto()  # |...|
    CHAR = auto()  # #\a #\space #\x41
    KEYWORD = auto()  # #:name
    QUOTE = auto()  # ' ` , ,@
    DATUM_COMMENT = auto()  # #;
    COMMENT = auto()  # ; line  or  #| block |#
    WHITESPACE = auto()
    EOF = auto()


class BracketKind(Enum):
    """Bracket flavours. VECTOR opens with ``#(`` and closes with ``)``."""

    ROUND = ("(", ")")
    SQUARE = ("[", "]")
    CURLY = ("{", "}")
    VECTOR = ("#(", ")")

    @property
    def opening(self) -> str:
        return self.value[0]

    @property
    def closing(self) -> str:
        return self.value[1]

    def closed_by(self, kind: "BracketKind") -> bool:
        """Whether a close token of ``kind`` terminates this opener."""
        if self is BracketKind.VECTOR:
            return kind is BracketKind.ROUND
        return kind is self


class QuoteKind(Enum):
    """Quote markers and the symbol each one abbreviates."""

    QUOTE = ("'", "quote")
    QUASIQUOTE = ("`", "quasiquote")
    UNQUOTE = (",", "unquote")
    UNQUOTE_SPLICING = (",@", "unquote-splicing")

    @property
    def marker(self) -> str:
        return self.value[0]

    @property
    def symbol_name(self) -> str:
        return self.value[1]


OPEN_BRACKETS: dict[str, BracketKind] = {
    "(": BracketKind.ROUND,
    "[": BracketKind.SQUARE,
    "{": BracketKind.CURLY,
}

CLOSE_BRACKETS: dict[str, BracketKind] = {
    ")": BracketKind.ROUND,
    "]": BracketKind.SQUARE,
    "}": BracketKind.CURLY,
}


class Signal(Enum):
    """Out-of-band results of a pull operation."""

    NEED_INPUT = auto()  # nothing buffered, more input may still arrive
    END_OF_INPUT = auto()  # source exhausted

    def __repr__(self) -> str:
        return self.name


NEED_INPUT = Signal.NEED_INPUT
END_OF_INPUT = Signal.END_OF_INPUT


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the tokenizer (or by the printer).

    Attributes:
        type: The token type
        value: Token payload (see TokenType)
        start: Position of the first character
        end: Position just past the last character
        kind: BracketKind for OPEN/CLOSE, QuoteKind for QUOTE, else None
        source_file: Optional source file path

    """

    type: TokenType
    value: str
    start: Position
    end: Position
    kind: BracketKind | QuoteKind | None = None
    source_file: str | None = None

    @property
    def span(self) -> Span:
        return Span(self.start, self.end, self.source_file)

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.start})"
