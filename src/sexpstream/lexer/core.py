"""Streaming state-machine tokenizer.

The tokenizer pulls one character at a time from a CharDecoder and feeds
it to the scanner of the current mode. All partial state (mode, token
buffer, escape and nesting counters) lives on the instance, so a token cut
off by a chunk boundary simply waits for the next chunk.

No regex, no lookahead beyond one re-consumed character.

Thread Safety:
Tokenizer instances hold per-stream state. Use one per stream, from one
thread at a time.

"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from sexpstream.config import ReadConfig, get_read_config
from sexpstream.decoder import CharDecoder
from sexpstream.errors import DecodeError, IoError, TokenizeError
from sexpstream.lexer.modes import LexerMode
from sexpstream.lexer.scanners import (
    AtomScannerMixin,
    CommentScannerMixin,
    HashScannerMixin,
    StringScannerMixin,
)
from sexpstream.location import START, Position, Span
from sexpstream.source import DEFAULT_CHUNK_SIZE, ChunkSource, open_source
from sexpstream.tokens import (
    CLOSE_BRACKETS,
    END_OF_INPUT,
    NEED_INPUT,
    OPEN_BRACKETS,
    QuoteKind,
    Signal,
    Token,
    TokenType,
)
from sexpstream.utils.logger import get_logger

logger = get_logger(__name__)

_QUOTE_CHARS = {
    "'": QuoteKind.QUOTE,
    "`": QuoteKind.QUASIQUOTE,
}


class Tokenizer(
    # Scanners (mode-specific scanning logic)
    AtomScannerMixin,
    StringScannerMixin,
    CommentScannerMixin,
    HashScannerMixin,
):
    """Incremental S-expression tokenizer.

    Works in two modes:

    - pull mode: constructed with a source (str, bytes, file object,
      iterable of chunks); reads the next chunk whenever it runs dry.
    - push mode: constructed without a source; the caller hands over data
      with ``feed``/``feed_text`` and ends the stream with ``finish``.
      ``next_token`` returns NEED_INPUT whenever the buffered data is used up.

    Usage:
            >>> tok = Tokenizer()
            >>> tok.feed(b"(foo ")
            >>> tok.next_token()
            Token(OPEN, '(', 1:1)
            >>> tok.next_token()
            Token(ATOM, 'foo', 1:2)
            >>> tok.next_token()
            NEED_INPUT
            >>> tok.feed(b"42)")
            >>> tok.finish()
            >>> [t.value for t in tok.tokenize()]
            ['42', ')', '']

    Thread Safety:
        Tokenizer instances are single-use. Create one per stream.
        All state is instance-local; no shared mutable state.

    """

    __slots__ = (
        "_decoder",
        "_source",
        "_source_file",
        "_chunks_read",
        "_io_error",
        # Position tracking
        "_pos",
        "_char_start",
        "_token_start",
        "_char",
        "_reconsume",
        # State machine
        "_mode",
        "_buf",
        "_scanners",
        # Delimited literal state
        "_delimiter",
        "_literal_type",
        "_hex",
        "_hex_width",
        # Block comment state
        "_comment_depth",
        "_comment_prev",
        # Captured config
        "_retain_whitespace",
        "_retain_comments",
        "_hex_terminator",
        "_hex_max_digits",
    )

    def __init__(
        self,
        source: object = None,
        *,
        source_file: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        config: ReadConfig | None = None,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            source: Anything open_source() accepts, or None for push mode
            source_file: Optional source file path for spans and errors
            chunk_size: Read size used for file-like sources
            config: Read configuration (defaults to the active context's)
        """
        config = config if config is not None else get_read_config()
        self._decoder = CharDecoder()
        self._source: ChunkSource | None = (
            open_source(source, chunk_size) if source is not None else None
        )
        self._source_file = source_file
        self._chunks_read = 0
        self._io_error: IoError | None = None

        self._pos = START
        self._char_start = START
        self._token_start = START
        self._char: str | None = None
        self._reconsume = False

        self._mode = LexerMode.NORMAL
        self._buf: list[str] = []

        self._delimiter = '"'
        self._literal_type = TokenType.STRING
        self._hex: list[str] = []
        self._hex_width = 0
        self._comment_depth = 0
        self._comment_prev = ""

        self._retain_whitespace = config.retain_whitespace
        self._retain_comments = config.retain_comments
        self._hex_terminator = config.hex_escape_terminator
        self._hex_max_digits = config.hex_escape_max_digits

        self._scanners: dict[LexerMode, Callable[[str | None], Token | None]] = {
            LexerMode.NORMAL: self._scan_normal,
            LexerMode.WHITESPACE: self._scan_whitespace,
            LexerMode.ATOM: self._scan_atom,
            LexerMode.COMMA: self._scan_comma,
            LexerMode.STRING: self._scan_string,
            LexerMode.STRING_ESCAPE: self._scan_string_escape,
            LexerMode.STRING_HEX: self._scan_string_hex,
            LexerMode.STRING_GAP: self._scan_string_gap,
            LexerMode.STRING_INDENT: self._scan_string_indent,
            LexerMode.LINE_COMMENT: self._scan_line_comment,
            LexerMode.BLOCK_COMMENT: self._scan_block_comment,
            LexerMode.HASH: self._scan_hash,
            LexerMode.CHAR_FIRST: self._scan_char_first,
            LexerMode.CHAR_NAME: self._scan_char_name,
            LexerMode.KEYWORD_FIRST: self._scan_keyword_first,
            LexerMode.KEYWORD: self._scan_keyword,
        }

    @property
    def position(self) -> Position:
        """Position just after the last character consumed."""
        return self._pos

    @property
    def source_file(self) -> str | None:
        return self._source_file

    @property
    def mode(self) -> LexerMode:
        return self._mode

    # =========================================================================
    # Push-mode input
    # =========================================================================

    def feed(self, data: bytes | bytearray | memoryview) -> None:
        """Hand over another chunk of UTF-8 bytes (push mode)."""
        self._check_push_mode()
        self._decoder.feed(data)

    def feed_text(self, text: str) -> None:
        """Hand over already-decoded text (push mode)."""
        self._check_push_mode()
        self._decoder.feed_text(text)

    def finish(self) -> None:
        """Signal that no more input will arrive (push mode)."""
        self._check_push_mode()
        self._decoder.finish()

    def _check_push_mode(self) -> None:
        if self._source is not None:
            raise RuntimeError("tokenizer reads from its own source; feed() is for push mode")

    # =========================================================================
    # Token stream
    # =========================================================================

    def next_token(self) -> Token | Signal:
        """Produce the next token.

        Returns:
            The next Token (EOF, repeatedly, once input is exhausted), or
            NEED_INPUT in push mode when more data is required.

        Raises:
            TokenizeError: Malformed token; the tokenizer returns to NORMAL
                mode and continues after the offending character.
            DecodeError: Invalid UTF-8 (terminal).
            IoError: The source failed (terminal).
        """
        scanners = self._scanners
        while True:
            if self._reconsume:
                self._reconsume = False
                char = self._char
            else:
                pulled = self._pull_char()
                if pulled is NEED_INPUT:
                    return NEED_INPUT
                char = None if pulled is END_OF_INPUT else pulled
                self._char = char
                self._char_start = self._pos
                if char is not None:
                    self._pos = self._pos.advance(char)

            try:
                token = scanners[self._mode](char)
            except TokenizeError:
                self._reset_state()
                raise
            if token is not None:
                return token

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens up to and including EOF.

        Raises:
            RuntimeError: In push mode, if input runs out before finish().
        """
        while True:
            token = self.next_token()
            if token is NEED_INPUT:
                raise RuntimeError("tokenizer needs more input; call feed() or finish() first")
            assert isinstance(token, Token)
            yield token
            if token.type is TokenType.EOF:
                return

    def __iter__(self) -> Iterator[Token]:
        return self.tokenize()

    # =========================================================================
    # Character supply
    # =========================================================================

    def _pull_char(self) -> str | Signal:
        """Next character from the decoder, reading chunks in pull mode."""
        if self._io_error is not None:
            raise self._io_error
        while True:
            try:
                result = self._decoder.next_char()
            except DecodeError as e:
                raise e.with_span(Span.at(self._pos, self._source_file)) from None
            if result is not NEED_INPUT or self._source is None:
                return result
            self._read_chunk()

    def _read_chunk(self) -> None:
        assert self._source is not None
        try:
            chunk = self._source.read_chunk()
        except OSError as e:
            self._io_error = IoError(f"failed to read input: {e}", Span.at(self._pos, self._source_file))
            raise self._io_error from e
        if chunk is None:
            logger.debug("Source exhausted after %d chunk(s) at %s", self._chunks_read, self._pos)
            self._decoder.finish()
            return
        self._chunks_read += 1
        if isinstance(chunk, str):
            logger.debug("Read chunk %d (%d chars)", self._chunks_read, len(chunk))
            self._decoder.feed_text(chunk)
        else:
            logger.debug("Read chunk %d (%d bytes)", self._chunks_read, len(chunk))
            self._decoder.feed(chunk)

    def _reset_state(self) -> None:
        """Drop the partial token after an error."""
        self._mode = LexerMode.NORMAL
        self._buf = []
        self._reconsume = False

    # =========================================================================
    # NORMAL mode
    # =========================================================================

    def _scan_normal(self, char: str | None) -> Token | None:
        """Dispatch on the first character of a token."""
        if char is None:
            return Token(TokenType.EOF, "", self._pos, self._pos, None, self._source_file)

        kind = OPEN_BRACKETS.get(char)
        if kind is not None:
            return self._emit_single(TokenType.OPEN, char, kind)
        kind = CLOSE_BRACKETS.get(char)
        if kind is not None:
            return self._emit_single(TokenType.CLOSE, char, kind)

        if char.isspace():
            if self._retain_whitespace:
                self._begin(LexerMode.WHITESPACE, char)
            return None

        quote = _QUOTE_CHARS.get(char)
        if quote is not None:
            return self._emit_single(TokenType.QUOTE, char, quote)

        if char == '"':
            self._start_delimited('"', TokenType.STRING)
        elif char == "|":
            self._start_delimited("|", TokenType.SYMBOL)
        elif char == ";":
            self._begin(LexerMode.LINE_COMMENT, ";")
        elif char == "#":
            self._begin(LexerMode.HASH)
        elif char == ",":
            self._begin(LexerMode.COMMA)
        else:
            self._start_atom(char)
        return None
