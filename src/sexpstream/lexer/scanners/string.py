"""Delimited literal scanner mixin.

Handles ``"strings"``, ``|quoted symbols|`` and ``#:|quoted keywords|``:
all three share one escape grammar and differ only in their delimiter
and in the token type they produce.
"""

from __future__ import annotations

from typing import NoReturn

from sexpstream.errors import TokenizeErrorKind
from sexpstream.lexer.modes import (
    FIXED_HEX_ESCAPES,
    HEX_DIGITS,
    STRING_ESCAPES,
    LexerMode,
    valid_code_point,
)
from sexpstream.lexer.scanners.base import ScannerMixinBase
from sexpstream.tokens import Token, TokenType


class StringScannerMixin(ScannerMixinBase):
    """Mixin scanning delimited literals with an explicit escape state.

    The escape state lives in the mode (STRING_ESCAPE, STRING_HEX, ...),
    so an escaped delimiter never ends the literal and a literal cut off
    by a chunk boundary resumes exactly where it stopped.

    """

    _delimiter: str
    _literal_type: TokenType
    _hex: list[str]
    _hex_width: int
    _hex_terminator: str | None
    _hex_max_digits: int

    def _start_delimited(self, delimiter: str, token_type: TokenType, *, keep_start: bool = False) -> None:
        """Enter STRING mode; ``keep_start`` extends a token already begun."""
        if keep_start:
            self._mode = LexerMode.STRING
            self._buf = []
        else:
            self._begin(LexerMode.STRING)
        self._delimiter = delimiter
        self._literal_type = token_type

    def _scan_string(self, char: str | None) -> Token | None:
        if char is None:
            self._unterminated()
        if char == "\\":
            self._mode = LexerMode.STRING_ESCAPE
        elif char == self._delimiter:
            return self._emit(self._literal_type, "".join(self._buf))
        else:
            self._buf.append(char)
        return None

    def _scan_string_escape(self, char: str | None) -> Token | None:
        if char is None:
            self._unterminated()
        replacement = STRING_ESCAPES.get(char)
        if replacement is not None:
            self._buf.append(replacement)
            self._mode = LexerMode.STRING
        elif char == "x":
            self._start_hex(0)
        elif char in FIXED_HEX_ESCAPES:
            self._start_hex(FIXED_HEX_ESCAPES[char])
        elif char == "\n":
            self._mode = LexerMode.STRING_INDENT
        elif char in " \t":
            self._mode = LexerMode.STRING_GAP
        else:
            self._fail(TokenizeErrorKind.INVALID_ESCAPE, f"\\{char}", here=True)
        return None

    def _scan_string_hex(self, char: str | None) -> Token | None:
        if char is None:
            self._unterminated()
        if self._hex_width:
            # \uXXXX / \UXXXXXXXX: exactly _hex_width digits
            if char not in HEX_DIGITS:
                self._fail(TokenizeErrorKind.INVALID_ESCAPE, f"expected hex digit, got {char!r}", here=True)
            self._hex.append(char)
            if len(self._hex) == self._hex_width:
                self._push_code_point()
        elif self._hex_terminator is not None:
            # \xHH; : digits up to the terminator
            if char == self._hex_terminator and self._hex:
                self._push_code_point()
            elif char in HEX_DIGITS and len(self._hex) < self._hex_max_digits:
                self._hex.append(char)
            else:
                self._fail(
                    TokenizeErrorKind.INVALID_ESCAPE,
                    f"\\x escape must be 1-{self._hex_max_digits} hex digits ending in "
                    f"{self._hex_terminator!r}",
                    here=True,
                )
        elif char in HEX_DIGITS:
            self._hex.append(char)
            if len(self._hex) == self._hex_max_digits:
                self._push_code_point()
        else:
            # Flexible \xHH: the first non-digit belongs to the string again
            if not self._hex:
                self._fail(TokenizeErrorKind.INVALID_ESCAPE, "\\x without hex digits", here=True)
            self._push_code_point()
            self._reconsume = True
        return None

    def _scan_string_gap(self, char: str | None) -> Token | None:
        """Between ``\\`` + intraline whitespace and the newline it escapes."""
        if char is None:
            self._unterminated()
        if char == "\n":
            self._mode = LexerMode.STRING_INDENT
        elif char not in " \t":
            self._fail(TokenizeErrorKind.INVALID_ESCAPE, "line continuation must end the line", here=True)
        return None

    def _scan_string_indent(self, char: str | None) -> Token | None:
        """Leading whitespace of the line after a line continuation."""
        if char is None:
            self._unterminated()
        if char not in " \t":
            self._mode = LexerMode.STRING
            self._reconsume = True
        return None

    def _start_hex(self, width: int) -> None:
        self._hex = []
        self._hex_width = width
        self._mode = LexerMode.STRING_HEX

    def _push_code_point(self) -> None:
        code = int("".join(self._hex), 16)
        if not valid_code_point(code):
            self._fail(TokenizeErrorKind.INVALID_ESCAPE, f"invalid code point {code:#x}", here=True)
        self._buf.append(chr(code))
        self._mode = LexerMode.STRING

    def _unterminated(self) -> NoReturn:
        self._fail(TokenizeErrorKind.UNTERMINATED_STRING, f"missing closing {self._delimiter!r}")
