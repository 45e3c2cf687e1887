"""Atom, whitespace and unquote scanner mixin."""

from __future__ import annotations

from sexpstream.lexer.modes import LexerMode, is_delimiter
from sexpstream.lexer.scanners.base import ScannerMixinBase
from sexpstream.tokens import QuoteKind, Token, TokenType


class AtomScannerMixin(ScannerMixinBase):
    """Mixin scanning maximal runs of constituent or whitespace characters.

    Atom lexemes are kept raw; deciding between number, symbol and
    boolean is left to the parser.

    """

    def _scan_atom(self, char: str | None) -> Token | None:
        if char is None or is_delimiter(char):
            return self._finish_before(TokenType.ATOM, "".join(self._buf))
        self._buf.append(char)
        return None

    def _scan_whitespace(self, char: str | None) -> Token | None:
        if char is not None and char.isspace():
            self._buf.append(char)
            return None
        return self._finish_before(TokenType.WHITESPACE, "".join(self._buf))

    def _scan_comma(self, char: str | None) -> Token | None:
        """Decide between ``,`` and ``,@``."""
        if char == "@":
            return self._emit(TokenType.QUOTE, ",@", QuoteKind.UNQUOTE_SPLICING)
        return self._finish_before(TokenType.QUOTE, ",", QuoteKind.UNQUOTE)

    def _start_atom(self, char: str) -> None:
        self._begin(LexerMode.ATOM, char)
