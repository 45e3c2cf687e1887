"""Comment scanner mixin: ``; line`` and nested ``#| block |#`` comments."""

from __future__ import annotations

from sexpstream.errors import TokenizeErrorKind
from sexpstream.lexer.modes import LexerMode
from sexpstream.lexer.scanners.base import ScannerMixinBase
from sexpstream.tokens import Token, TokenType


class CommentScannerMixin(ScannerMixinBase):
    """Mixin scanning comments.

    Comments always advance the position. They only become tokens when
    the tokenizer retains comments; otherwise they are dropped here.

    """

    _retain_comments: bool
    _comment_depth: int
    _comment_prev: str

    def _scan_line_comment(self, char: str | None) -> Token | None:
        """Everything up to (not including) the newline."""
        if char is None or char == "\n":
            text = "".join(self._buf)
            self._mode = LexerMode.NORMAL
            self._reconsume = True
            if self._retain_comments:
                return self._finish_before(TokenType.COMMENT, text)
            return None
        self._buf.append(char)
        return None

    def _start_block_comment(self) -> None:
        """Called on the ``|`` of ``#|``; the token began at ``#``."""
        self._mode = LexerMode.BLOCK_COMMENT
        self._buf = ["#", "|"]
        self._comment_depth = 1
        self._comment_prev = ""

    def _scan_block_comment(self, char: str | None) -> Token | None:
        if char is None:
            self._fail(TokenizeErrorKind.UNTERMINATED_COMMENT, "missing closing '|#'")
        self._buf.append(char)
        prev = self._comment_prev
        if prev == "|" and char == "#":
            self._comment_depth -= 1
            self._comment_prev = ""
            if self._comment_depth == 0:
                text = "".join(self._buf)
                self._mode = LexerMode.NORMAL
                if self._retain_comments:
                    return self._emit(TokenType.COMMENT, text)
        elif prev == "#" and char == "|":
            self._comment_depth += 1
            self._comment_prev = ""
        else:
            self._comment_prev = char
        return None
