"""Incremental stack-driven parser producing value trees.

Consumes tokens from a Tokenizer and builds immutable value nodes. The
parser keeps its own explicit stack of open frames instead of recursing,
so it can stop at any token boundary when the input runs dry and pick up
again once more data arrives.

Thread Safety:
- Parser instances hold per-stream state; use one per stream
- Configuration is captured from the ContextVar at construction
- The values produced are immutable and safe to share across threads

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Final

from sexpstream.config import ReadConfig, get_read_config
from sexpstream.errors import ParseError, ParseErrorKind, TokenizeError
from sexpstream.lexer import Tokenizer
from sexpstream.location import Span
from sexpstream.nodes import (
    Character,
    ImproperList,
    Keyword,
    KeywordStyle,
    ProperList,
    String,
    Symbol,
    Value,
    Vector,
    make_dotted,
)
from sexpstream.parsing import FrameStack, ListFrame, PrefixFrame, classify_atom
from sexpstream.source import DEFAULT_CHUNK_SIZE
from sexpstream.tokens import (
    END_OF_INPUT,
    NEED_INPUT,
    BracketKind,
    QuoteKind,
    Signal,
    Token,
    TokenType,
)
from sexpstream.utils.logger import get_logger

logger = get_logger(__name__)

# Returned by _step when the token did not complete a top-level datum
_PENDING: Final = object()


def expand_quote(kind: QuoteKind, datum: Value, span: Span) -> Value:
    """Default quote expander: ``'x`` becomes ``(quote x)``.

    >>> from sexpstream.nodes import Symbol
    >>> from sexpstream.location import START, Span
    >>> expand_quote(QuoteKind.QUOTE, Symbol.of("x"), Span.at(START)).items[0].text
    'quote'
    """
    return ProperList((Symbol.of(kind.symbol_name), datum), span=span)


class Parser:
    """Incremental S-expression parser.

    Reads one top-level datum per ``read()`` call. In push mode the caller
    feeds data through ``feed``/``feed_text`` and ``read()`` returns
    NEED_INPUT whenever a datum is still incomplete; partially built lists
    survive between calls.

    Usage:
            >>> parser = Parser()
            >>> parser.feed(b"(a (b")
            >>> parser.read()
            NEED_INPUT
            >>> parser.feed(b" c))")
            >>> parser.finish()
            >>> str(parser.read())
            '(a (b c))'
            >>> parser.read()
            END_OF_INPUT

    Errors:
        Any ParseError or TokenizeError discards the partially read datum
        (the frame stack is cleared). Values returned earlier stay valid and
        the next ``read()`` continues with the following token.

    """

    __slots__ = (
        "_tokenizer",
        "_frames",
        "_config",
        "_expander",
    )

    def __init__(
        self,
        source: object = None,
        *,
        source_file: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        config: ReadConfig | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            source: A Tokenizer, anything Tokenizer accepts as a source, or
                None for push mode
            source_file: Optional source file path for spans and errors
            chunk_size: Read size used for file-like sources
            config: Read configuration (defaults to the active context's)
        """
        self._config = config if config is not None else get_read_config()
        if isinstance(source, Tokenizer):
            self._tokenizer = source
        else:
            self._tokenizer = Tokenizer(
                source, source_file=source_file, chunk_size=chunk_size, config=self._config
            )
        self._frames = FrameStack()
        self._expander = self._config.quote_expander or expand_quote

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer

    @property
    def depth(self) -> int:
        """Number of frames currently open."""
        return len(self._frames)

    # =========================================================================
    # Push-mode input
    # =========================================================================

    def feed(self, data: bytes | bytearray | memoryview) -> None:
        self._tokenizer.feed(data)

    def feed_text(self, text: str) -> None:
        self._tokenizer.feed_text(text)

    def finish(self) -> None:
        self._tokenizer.finish()

    # =========================================================================
    # Reading
    # =========================================================================

    def read(self) -> Value | Signal:
        """Read the next top-level datum.

        Returns:
            The datum, END_OF_INPUT once the input is exhausted, or
            NEED_INPUT (push mode) when more data is required.

        Raises:
            ParseError: Structurally invalid input.
            TokenizeError: Lexically invalid input.
            DecodeError, IoError: From the tokenizer (terminal).
        """
        next_token = self._tokenizer.next_token
        while True:
            token = self._call(next_token)
            if token is NEED_INPUT:
                return NEED_INPUT
            assert isinstance(token, Token)
            result = self._call(self._step, token)
            if result is not _PENDING:
                return result

    def values(self) -> Iterator[Value]:
        """Yield every remaining datum.

        Values are yielded as soon as they are complete, so everything
        before a syntax error is delivered before the error is raised.

        Raises:
            RuntimeError: In push mode, if input runs out before finish().
        """
        while True:
            value = self.read()
            if value is END_OF_INPUT:
                return
            if value is NEED_INPUT:
                raise RuntimeError("parser needs more input; call feed() or finish() first")
            assert isinstance(value, Value)
            yield value

    def __iter__(self) -> Iterator[Value]:
        return self.values()

    def _call(self, func: Callable[..., object], *args: object) -> object:
        """Run one parsing step, discarding open frames on error."""
        try:
            return func(*args)
        except (ParseError, TokenizeError):
            dropped = self._frames.clear()
            if dropped:
                logger.debug("Discarded %d open frame(s) after error", dropped)
            raise

    # =========================================================================
    # Token handling
    # =========================================================================

    def _step(self, token: Token) -> object:
        """Consume one token; returns a finished top-level datum or _PENDING."""
        ttype = token.type

        if ttype is TokenType.WHITESPACE or ttype is TokenType.COMMENT:
            return _PENDING

        if ttype is TokenType.EOF:
            if self._frames:
                opener = self._frames.top.token
                raise ParseError(
                    ParseErrorKind.UNEXPECTED_END_OF_INPUT,
                    opener.span,
                    f"{opener.value!r} is never closed",
                )
            return END_OF_INPUT

        if ttype is TokenType.OPEN:
            self._open(token)
            return _PENDING

        if ttype is TokenType.CLOSE:
            return self._close(token)

        if ttype is TokenType.QUOTE or ttype is TokenType.DATUM_COMMENT:
            self._frames.push(PrefixFrame(token))
            return _PENDING

        if ttype is TokenType.ATOM:
            if token.value == "." and self._frames:
                top = self._frames.top
                if isinstance(top, ListFrame):
                    top.mark_dot(token)
                    return _PENDING
            return self._complete(classify_atom(token.value, token.span, self._config))

        return self._complete(self._leaf(token))

    def _leaf(self, token: Token) -> Value:
        ttype = token.type
        span = token.span
        if ttype is TokenType.STRING:
            return String(token.value, span=span)
        if ttype is TokenType.SYMBOL:
            return Symbol.of(token.value, span=span)
        if ttype is TokenType.CHAR:
            return Character(token.value, span=span)
        if ttype is TokenType.KEYWORD:
            return Keyword(token.value, KeywordStyle.HASH_COLON, span=span)
        raise ParseError(ParseErrorKind.UNEXPECTED_TOKEN, span, ttype.name)

    def _open(self, token: Token) -> None:
        max_depth = self._config.max_depth
        if max_depth is not None and self._frames.list_depth >= max_depth:
            raise ParseError(
                ParseErrorKind.NESTING_TOO_DEEP,
                token.span,
                f"more than {max_depth} nested lists",
            )
        assert isinstance(token.kind, BracketKind)
        self._frames.push(ListFrame(token.kind, token))

    def _close(self, token: Token) -> object:
        if not self._frames:
            raise ParseError(ParseErrorKind.UNEXPECTED_TOKEN, token.span, f"unexpected {token.value!r}")
        frame = self._frames.top
        if isinstance(frame, PrefixFrame):
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                token.span,
                f"{token.value!r} where {frame.token.value!r} expects a datum",
            )
        assert isinstance(token.kind, BracketKind)
        if not frame.bracket.closed_by(token.kind):
            raise ParseError(
                ParseErrorKind.MISMATCHED_BRACKET,
                token.span,
                f"{frame.open_token.value!r} closed by {token.value!r}",
            )

        span = frame.open_token.span.span_to(token.span)
        if frame.bracket is BracketKind.VECTOR:
            value: Value = Vector(tuple(frame.items), span=span)
        elif frame.dot is not None:
            if frame.tail is None:
                raise ParseError(
                    ParseErrorKind.MALFORMED_DOT_NOTATION, frame.dot.span, "'.' needs a datum after it"
                )
            value = make_dotted(frame.items, frame.tail, span=span)
            if isinstance(value, ImproperList) and not self._config.allow_improper_lists:
                raise ParseError(ParseErrorKind.IMPROPER_LIST_DISALLOWED, frame.dot.span)
        else:
            value = ProperList(tuple(frame.items), frame.bracket, span=span)

        self._frames.pop()
        return self._complete(value)

    def _complete(self, value: Value) -> object:
        """Hand a finished datum to the innermost frame.

        Quote frames wrap it and pass the result outward; a datum comment
        swallows it.
        """
        frames = self._frames
        while frames:
            frame = frames.top
            if isinstance(frame, ListFrame):
                frame.accept(value)
                return _PENDING
            frames.pop()
            if frame.is_datum_comment:
                return _PENDING
            span = frame.token.span
            if value.span is not None:
                span = span.span_to(value.span)
            value = self._expander(frame.quote_kind, value, span)
        return value
