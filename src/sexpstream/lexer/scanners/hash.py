"""Hash dispatch scanner mixin.

Everything that starts with ``#``: vectors, block and datum comments,
character literals, ``#:keywords`` and hash atoms such as ``#t`` and
``#x1F``.
"""

from __future__ import annotations

from sexpstream.errors import TokenizeErrorKind
from sexpstream.lexer.modes import CHAR_NAMES, HEX_DIGITS, LexerMode, is_delimiter, valid_code_point
from sexpstream.lexer.scanners.base import ScannerMixinBase
from sexpstream.tokens import BracketKind, Token, TokenType


def resolve_char_name(name: str) -> str | None:
    """Character named by the text after ``#\\``, or None if unknown.

    >>> resolve_char_name("space")
    ' '
    >>> resolve_char_name("x41")
    'A'
    """
    if len(name) == 1:
        return name
    named = CHAR_NAMES.get(name)
    if named is not None:
        return named
    if name[0] in "xuU":
        digits = name[1:]
        if 1 <= len(digits) <= 8 and all(c in HEX_DIGITS for c in digits):
            code = int(digits, 16)
            if valid_code_point(code):
                return chr(code)
    return None


class HashScannerMixin(ScannerMixinBase):
    """Mixin scanning the ``#`` dispatch characters.

    Comments and ``#:|quoted|`` keywords are handed over to the comment
    and string scanners.

    """

    def _start_block_comment(self) -> None:
        """Enter BLOCK_COMMENT after ``#|``."""
        raise NotImplementedError

    def _start_delimited(self, delimiter: str, token_type: TokenType, *, keep_start: bool = False) -> None:
        """Enter STRING mode for a delimited literal."""
        raise NotImplementedError

    def _scan_hash(self, char: str | None) -> Token | None:
        if char is None or is_delimiter(char):
            if char == "(":
                return self._emit(TokenType.OPEN, "#(", BracketKind.VECTOR)
            if char == "|":
                self._start_block_comment()
                return None
            if char == ";":
                return self._emit(TokenType.DATUM_COMMENT, "#;")
            self._fail(TokenizeErrorKind.INVALID_HASH_SYNTAX, "'#' must be followed by a datum")
        if char == "\\":
            self._mode = LexerMode.CHAR_FIRST
        elif char == ":":
            self._mode = LexerMode.KEYWORD_FIRST
        else:
            self._mode = LexerMode.ATOM
            self._buf = ["#", char]
        return None

    def _scan_char_first(self, char: str | None) -> Token | None:
        """First character after ``#\\``; delimiters are literal here."""
        if char is None:
            self._fail(TokenizeErrorKind.INVALID_CHARACTER_LITERAL, "missing character after '#\\'")
        if is_delimiter(char):
            return self._emit(TokenType.CHAR, char)
        self._mode = LexerMode.CHAR_NAME
        self._buf = [char]
        return None

    def _scan_char_name(self, char: str | None) -> Token | None:
        if char is not None and not is_delimiter(char):
            self._buf.append(char)
            return None
        name = "".join(self._buf)
        resolved = resolve_char_name(name)
        if resolved is None:
            self._fail(TokenizeErrorKind.INVALID_CHARACTER_LITERAL, f"#\\{name}")
        return self._finish_before(TokenType.CHAR, resolved)

    def _scan_keyword_first(self, char: str | None) -> Token | None:
        if char == "|":
            self._start_delimited("|", TokenType.KEYWORD, keep_start=True)
            return None
        if char is None or is_delimiter(char):
            self._fail(TokenizeErrorKind.INVALID_HASH_SYNTAX, "empty keyword after '#:'")
        self._mode = LexerMode.KEYWORD
        self._buf = [char]
        return None

    def _scan_keyword(self, char: str | None) -> Token | None:
        if char is None or is_delimiter(char):
            return self._finish_before(TokenType.KEYWORD, "".join(self._buf))
        self._buf.append(char)
        return None
