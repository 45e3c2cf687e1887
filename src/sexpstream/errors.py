"""Exception classes for sexpstream.

Every error raised while reading carries the span (or at least the
position) of the offending input. None of them is recovered from
internally: a tokenizer error aborts the current token, a parse error
aborts the current top-level read.
"""

from __future__ import annotations

from enum import Enum

from sexpstream.location import Position, Span


class TokenizeErrorKind(Enum):
    """Reasons the tokenizer can reject its input."""

    UNTERMINATED_STRING = "unterminated string"
    UNTERMINATED_COMMENT = "unterminated block comment"
    INVALID_CHARACTER_LITERAL = "invalid character literal"
    INVALID_NUMBER_SYNTAX = "invalid number syntax"
    INVALID_ESCAPE = "invalid escape sequence"
    INVALID_HASH_SYNTAX = "invalid '#' syntax"


class ParseErrorKind(Enum):
    """Reasons the parser can reject a token sequence."""

    UNEXPECTED_TOKEN = "unexpected token"
    MISMATCHED_BRACKET = "mismatched bracket"
    UNEXPECTED_END_OF_INPUT = "unexpected end of input"
    MALFORMED_DOT_NOTATION = "malformed dot notation"
    IMPROPER_LIST_DISALLOWED = "improper list not allowed"
    NESTING_TOO_DEEP = "nesting too deep"


class SexpError(Exception):
    """Base exception for all sexpstream errors.

    Subclass this for specific error categories.
    """

    def __init__(self, message: str, span: Span | None = None) -> None:
        """Initialize error with optional location.

        Args:
            message: Error description
            span: Source range of the offending input (optional)
        """
        self.message = message
        self.span = span
        super().__init__(self._format())

    def _format(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.span} {self.message}"

    @property
    def position(self) -> Position | None:
        """Start position of the offending input, if known."""
        return self.span.start if self.span is not None else None

    @property
    def source_file(self) -> str | None:
        return self.span.source_file if self.span is not None else None

    def with_span(self, span: Span) -> SexpError:
        """Attach a span if the error has none yet (in place)."""
        if self.span is None:
            self.span = span
            self.args = (self._format(),)
        return self

    def with_source_file(self, source_file: str) -> SexpError:
        """Attach a file path to the error's span (in place)."""
        if self.span is not None and self.span.source_file is None:
            self.span = Span(self.span.start, self.span.end, source_file)
            self.args = (self._format(),)
        return self

    def __str__(self) -> str:
        return self._format()


class IoError(SexpError):
    """The byte source failed to produce data.

    The underlying ``OSError`` is chained as ``__cause__``.
    """


class DecodeError(SexpError):
    """The input is not valid UTF-8.

    Attributes:
        offset: Absolute byte offset of the first invalid byte
    """

    def __init__(self, offset: int, reason: str = "invalid UTF-8", span: Span | None = None) -> None:
        self.offset = offset
        self.reason = reason
        super().__init__(f"{reason} at byte offset {offset}", span)


class TokenizeError(SexpError):
    """Error while splitting characters into tokens."""

    def __init__(self, kind: TokenizeErrorKind, span: Span, detail: str = "") -> None:
        """Initialize tokenizer error.

        Args:
            kind: Error category
            span: Location of the offending token (for unterminated
                strings and comments, the opening delimiter)
            detail: Optional extra description appended to the kind
        """
        self.kind = kind
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message, span)


class ParseError(SexpError):
    """Error while assembling tokens into a value tree."""

    def __init__(self, kind: ParseErrorKind, span: Span, detail: str = "") -> None:
        """Initialize parse error.

        Args:
            kind: Error category
            span: Location of the offending token
            detail: Optional extra description appended to the kind
        """
        self.kind = kind
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message, span)
