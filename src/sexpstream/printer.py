"""Printer: value trees back to tokens and text.

The printer is the reading pipeline run backwards. A value tree becomes a
lazy stream of tokens carrying synthetic positions (as if the printed text
were being read), and each token renders to a text fragment. Nothing is
materialised unless the caller asks for a string with ``dumps``.

Layout: list elements are separated by exactly one space; there are no
newlines inside a printed value.

Thread Safety:
Printer instances hold only an optional config and may be shared.
Each call walks the tree with its own explicit stack.

"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterator
from typing import IO

from sexpstream.config import ReadConfig, get_read_config
from sexpstream.lexer.modes import NAMES_BY_CHAR, is_delimiter
from sexpstream.location import START, Position
from sexpstream.nodes import (
    Boolean,
    Character,
    Compound,
    ImproperList,
    Integer,
    Keyword,
    KeywordStyle,
    ProperList,
    String,
    Symbol,
    Value,
    Vector,
)
from sexpstream.parsing.atoms import is_plain_symbol_text
from sexpstream.stringbuilder import StringBuilder
from sexpstream.tokens import BracketKind, QuoteKind, Token, TokenType
from sexpstream.utils.numbers import format_decimal

# Escapes preferred over the generic hex form inside literals
_NAMED_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}

# A printed token before rendering: (type, value, kind)
_Piece = tuple[TokenType, str, BracketKind | QuoteKind | None]

_SPACE: _Piece = (TokenType.WHITESPACE, " ", None)
_DOT: _Piece = (TokenType.ATOM, ".", None)


def _is_control(char: str) -> bool:
    return unicodedata.category(char) == "Cc"


def escape_literal(text: str, delimiter: str, config: ReadConfig | None = None) -> str:
    """Escape ``text`` for use between two ``delimiter`` characters.

    Backslash, newline, tab and return get their short escapes; other
    control characters get a hex escape readable under ``config``.
    """
    terminator = (config or get_read_config()).hex_escape_terminator
    out: list[str] = []
    for char in text:
        named = _NAMED_ESCAPES.get(char)
        if named is not None:
            out.append(named)
        elif char == delimiter:
            out.append("\\" + char)
        elif _is_control(char):
            code = ord(char)
            out.append(f"\\x{code:X}{terminator}" if terminator else f"\\u{code:04X}")
        else:
            out.append(char)
    return "".join(out)


def char_literal(char: str) -> str:
    """Source form of a character: ``#\\space``, ``#\\a`` or ``#\\x7``."""
    name = NAMES_BY_CHAR.get(char)
    if name is not None:
        return f"#\\{name}"
    if char.isprintable() and not char.isspace():
        return f"#\\{char}"
    return f"#\\x{ord(char):X}"


def symbol_needs_bars(text: str, config: ReadConfig | None = None) -> bool:
    """Whether a symbol must be written as ``|...|`` to read back as itself."""
    if not is_plain_symbol_text(text, config):
        return True
    return any(is_delimiter(c) for c in text)


def _keyword_name_is_plain(name: str) -> bool:
    return bool(name) and not any(is_delimiter(c) for c in name)


def _colon_keyword_text(name: str, style: KeywordStyle) -> str | None:
    """``:name`` or ``name:`` when that reads back as the same keyword.

    Other names fall back to ``#:|name|``.
    """
    if style is KeywordStyle.HASH_COLON or not _keyword_name_is_plain(name):
        return None
    if style is KeywordStyle.PREFIX:
        return f":{name}"
    if name[0] in "#:":
        return None
    return f"{name}:"


def render_token(token: Token, config: ReadConfig | None = None) -> str:
    """Source text of a token.

    Works for printer tokens and for tokens read by the Tokenizer.
    """
    return _render(token.type, token.value, config)


def _render(ttype: TokenType, value: str, config: ReadConfig | None) -> str:
    if ttype is TokenType.STRING:
        return '"' + escape_literal(value, '"', config) + '"'
    if ttype is TokenType.SYMBOL:
        return f"|{escape_literal(value, '|', config)}|"
    if ttype is TokenType.CHAR:
        return char_literal(value)
    if ttype is TokenType.KEYWORD:
        if _keyword_name_is_plain(value):
            return f"#:{value}"
        return f"#:|{escape_literal(value, '|', config)}|"
    return value


class Printer:
    """Turns values into tokens and text.

    The config only affects escaping decisions (hex escape terminator,
    colon keywords); None uses the active context's config per call.

    Usage:
            >>> from sexpstream.nodes import Integer, Symbol, make_list
            >>> Printer().dumps(make_list([Symbol.of("a"), Integer(1)]))
            '(a 1)'

    """

    __slots__ = ("_config",)

    def __init__(self, config: ReadConfig | None = None) -> None:
        self._config = config

    @property
    def config(self) -> ReadConfig:
        return self._config if self._config is not None else get_read_config()

    def iter_tokens(self, value: Value, *, start: Position = START) -> Iterator[Token]:
        """Lazily produce the tokens of ``value`` with synthetic positions."""
        for token, _ in self._walk(value, start):
            yield token

    def iter_text(self, value: Value) -> Iterator[str]:
        """Lazily produce text fragments of ``value``."""
        for _, text in self._walk(value, START):
            if text:
                yield text

    def dumps(self, value: Value) -> str:
        return StringBuilder().extend(self.iter_text(value)).build()

    def write(self, value: Value, fp: IO[str]) -> None:
        """Stream the printed form of ``value`` into a text file object."""
        for text in self.iter_text(value):
            fp.write(text)

    def _walk(self, value: Value, start: Position) -> Iterator[tuple[Token, str]]:
        config = self.config
        pos = start
        # Work items: values still to print, or finished (type, text, kind) pieces
        stack: list[Value | _Piece] = [value]
        while stack:
            item = stack.pop()
            if isinstance(item, Compound):
                stack.extend(reversed(_expand_compound(item)))
                continue
            if isinstance(item, Value):
                ttype, raw = _atom_piece(item, config)
                kind = None
            else:
                ttype, raw, kind = item
            text = _render(ttype, raw, config)
            end = pos.advance_text(text)
            yield Token(ttype, raw, pos, end, kind), text
            pos = end


def _expand_compound(value: Compound) -> list[Value | _Piece]:
    """Open piece, elements separated by spaces, optional tail, close piece."""
    if isinstance(value, Vector):
        bracket = BracketKind.VECTOR
        close = BracketKind.ROUND
    else:
        assert isinstance(value, ProperList | ImproperList)
        bracket = close = value.bracket if isinstance(value, ProperList) else BracketKind.ROUND
    pieces: list[Value | _Piece] = [(TokenType.OPEN, bracket.opening, bracket)]
    for index, item in enumerate(value.items):
        if index:
            pieces.append(_SPACE)
        pieces.append(item)
    if isinstance(value, ImproperList):
        pieces.extend((_SPACE, _DOT, _SPACE, value.tail))
    pieces.append((TokenType.CLOSE, close.closing, close))
    return pieces


def _atom_piece(value: Value, config: ReadConfig) -> tuple[TokenType, str]:
    match value:
        case Boolean(value=flag):
            return TokenType.ATOM, "#t" if flag else "#f"
        case Integer(value=number):
            return TokenType.ATOM, format_decimal(number)
        case Symbol():
            text = value.text
            if symbol_needs_bars(text, config):
                return TokenType.SYMBOL, text
            return TokenType.ATOM, text
        case Keyword(name=name, style=style):
            colon_text = _colon_keyword_text(name, style)
            if colon_text is not None:
                return TokenType.ATOM, colon_text
            return TokenType.KEYWORD, name
        case Character(value=char):
            return TokenType.CHAR, char
        case String(value=text):
            return TokenType.STRING, text
    raise TypeError(f"cannot print {type(value).__name__}")


# Module-level printer that follows the active context's config
_DEFAULT_PRINTER = Printer()


def iter_tokens(value: Value, *, start: Position = START) -> Iterator[Token]:
    """Lazy token stream for ``value`` (see Printer.iter_tokens)."""
    return _DEFAULT_PRINTER.iter_tokens(value, start=start)


def iter_text(value: Value) -> Iterator[str]:
    """Lazy text fragments for ``value``."""
    return _DEFAULT_PRINTER.iter_text(value)


def dumps(value: Value) -> str:
    """Printed form of ``value`` as one string.

    Example:
        >>> from sexpstream.nodes import String, make_list
        >>> dumps(make_list([String('a"b')]))
        '("a\\\\"b")'
    """
    return _DEFAULT_PRINTER.dumps(value)


def write(value: Value, fp: IO[str]) -> None:
    """Stream the printed form of ``value`` into ``fp``."""
    _DEFAULT_PRINTER.write(value, fp)
