"""Tokenizer operating modes and character tables.

This module defines the finite state machine modes for the tokenizer
and the constant sets used to classify characters.
"""

from __future__ import annotations

from enum import Enum, auto


class LexerMode(Enum):
    """Tokenizer operating modes.

    Each mode is one state of the tokenizer's state machine; per-mode
    partial data (buffers, depth counters) lives on the Tokenizer.

    - NORMAL: Between tokens
    - WHITESPACE: Inside a run of retained whitespace
    - ATOM: Inside a symbol/number lexeme
    - COMMA: After ``,`` (deciding between unquote and unquote-splicing)
    - STRING / STRING_ESCAPE / STRING_HEX / STRING_GAP / STRING_INDENT:
      Inside a delimited literal (strings, ``|symbols|``, ``#:|keywords|``)
    - LINE_COMMENT / BLOCK_COMMENT: Inside comments
    - HASH: After ``#``
    - CHAR_FIRST / CHAR_NAME: Inside a ``#\\`` character literal
    - KEYWORD_FIRST / KEYWORD: Inside a ``#:`` keyword

    """

    NORMAL = auto()
    WHITESPACE = auto()
    ATOM = auto()
    COMMA = auto()
    STRING = auto()
    STRING_ESCAPE = auto()
    STRING_HEX = auto()
    STRING_GAP = auto()  # after "\" + spaces, waiting for the newline
    STRING_INDENT = auto()  # after an escaped newline, skipping indentation
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    HASH = auto()
    CHAR_FIRST = auto()
    CHAR_NAME = auto()
    KEYWORD_FIRST = auto()
    KEYWORD = auto()


# Characters that end an atom (in addition to whitespace)
DELIMITERS = frozenset("()[]{}\";'`,|")

# Single-character string escapes (R7RS 6.7 plus \v \f \0)
STRING_ESCAPES = {
    "a": "\x07",
    "b": "\x08",
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "v": "\x0b",
    "f": "\x0c",
    "0": "\x00",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "|": "|",
}

# Named character literals (R7RS)
CHAR_NAMES = {
    "alarm": "\x07",
    "backspace": "\x08",
    "delete": "\x7f",
    "escape": "\x1b",
    "newline": "\n",
    "null": "\x00",
    "return": "\r",
    "space": " ",
    "tab": "\t",
}

NAMES_BY_CHAR = {char: name for name, char in CHAR_NAMES.items()}

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Fixed-width escapes: \uXXXX and \UXXXXXXXX
FIXED_HEX_ESCAPES = {"u": 4, "U": 8}

MAX_CODE_POINT = 0x10FFFF


def is_delimiter(char: str) -> bool:
    """Whether ``char`` terminates an atom."""
    return char in DELIMITERS or char.isspace()


def valid_code_point(code: int) -> bool:
    """Unicode scalar values: no surrogates, at most U+10FFFF."""
    return 0 <= code <= MAX_CODE_POINT and not 0xD800 <= code <= 0xDFFF
