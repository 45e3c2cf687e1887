"""Shared state and token-building helpers for the scanner mixins.

Every scanner method has the same shape: it receives one character (or
None at end of input), updates the tokenizer's mode and buffers, and
returns a finished Token or None. A scanner that sees a character it does
not own (for example the ``)`` ending an atom) finishes its token with
``_finish_before``; the driver then feeds that character again in NORMAL
mode.

"""

from __future__ import annotations

from typing import NoReturn

from sexpstream.errors import TokenizeError, TokenizeErrorKind
from sexpstream.lexer.modes import LexerMode
from sexpstream.location import Position, Span
from sexpstream.tokens import BracketKind, QuoteKind, Token, TokenType


class ScannerMixinBase:
    """Host attributes and helpers shared by all scanner mixins.

    Required Host Attributes:
        - _mode: current LexerMode
        - _buf: characters of the token being built
        - _token_start: position of the token's first character
        - _char_start: position of the character being scanned
        - _pos: position just after the character being scanned
        - _reconsume: set when the current character must be scanned again
        - _source_file: optional file path for spans

    """

    _mode: LexerMode
    _buf: list[str]
    _token_start: Position
    _char_start: Position
    _pos: Position
    _reconsume: bool
    _source_file: str | None

    def _begin(self, mode: LexerMode, *initial: str) -> None:
        """Start a multi-character token at the current character."""
        self._mode = mode
        self._token_start = self._char_start
        self._buf = list(initial)

    def _emit(
        self,
        token_type: TokenType,
        value: str,
        kind: BracketKind | QuoteKind | None = None,
    ) -> Token:
        """Finish the current token including the current character."""
        self._mode = LexerMode.NORMAL
        return Token(token_type, value, self._token_start, self._pos, kind, self._source_file)

    def _emit_single(
        self,
        token_type: TokenType,
        value: str,
        kind: BracketKind | QuoteKind | None = None,
    ) -> Token:
        """Token made of exactly the current character (NORMAL mode)."""
        return Token(token_type, value, self._char_start, self._pos, kind, self._source_file)

    def _finish_before(
        self,
        token_type: TokenType,
        value: str,
        kind: BracketKind | QuoteKind | None = None,
    ) -> Token:
        """Finish the current token without the current character.

        The character is handed back to the driver for NORMAL mode.
        """
        self._mode = LexerMode.NORMAL
        self._reconsume = True
        return Token(token_type, value, self._token_start, self._char_start, kind, self._source_file)

    def _fail(self, kind: TokenizeErrorKind, detail: str = "", *, here: bool = False) -> NoReturn:
        """Raise a TokenizeError at the token start (or the current char)."""
        if here:
            span = Span(self._char_start, self._pos, self._source_file)
        else:
            span = Span(self._token_start, self._pos, self._source_file)
        raise TokenizeError(kind, span, detail)
