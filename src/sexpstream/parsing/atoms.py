"""Atom classification.

The tokenizer hands raw ATOM lexemes to the parser; this module decides
what they denote. Priority order:

1. integers (decimal with an optional exponent, or ``#x #o #b #d`` radix)
2. booleans ``#t #f`` (and ``#true #false``)
3. ``:name`` / ``name:`` keywords, when enabled
4. errors: a bare ``.`` and any other ``#`` lexeme
5. symbols

Strings that merely look numeric (``1.5``, ``3/4``, ``1+``) are symbols:
only exact integers are supported.

"""

from __future__ import annotations

import re
from typing import Final

from sexpstream.config import ReadConfig
from sexpstream.errors import TokenizeError, TokenizeErrorKind
from sexpstream.location import START, Span
from sexpstream.nodes import Boolean, Integer, Keyword, KeywordStyle, Symbol, Value
from sexpstream.utils.numbers import parse_decimal

# [+-]digits with an optional non-negative exponent: 12, -7, +3e2, 1e+6
_DECIMAL_RE: Final = re.compile(r"([+-]?)([0-9]+)(?:[eE]\+?([0-9]+))?", re.ASCII)

# #x-1F, #b101, #d+12
_RADIX_RE: Final = re.compile(r"#([xXoObBdD])([+-]?)(.*)", re.ASCII | re.DOTALL)

RADIXES: Final = {"x": 16, "o": 8, "b": 2, "d": 10}

_RADIX_DIGITS: Final = {
    16: frozenset("0123456789abcdefABCDEF"),
    8: frozenset("01234567"),
    2: frozenset("01"),
    10: frozenset("0123456789"),
}

# Larger exponents would allocate absurd amounts of memory
MAX_EXPONENT: Final = 100_000

SHORT_BOOLEANS: Final = {"#t": True, "#f": False}
LONG_BOOLEANS: Final = {"#true": True, "#false": False}


def parse_integer(text: str) -> int | None:
    """Integer denoted by ``text`` in the strict numeric grammar, else None.

    Raises:
        ValueError: For radix-prefixed text with invalid digits, or an
            exponent above MAX_EXPONENT.

    Examples:
        >>> parse_integer("-42")
        -42
        >>> parse_integer("12e3")
        12000
        >>> parse_integer("#xff")
        255
        >>> parse_integer("1.5") is None
        True
    """
    m = _DECIMAL_RE.fullmatch(text)
    if m is not None:
        sign, digits, exponent = m.groups()
        value = parse_decimal(digits)
        if exponent is not None:
            power = int(exponent) if len(exponent) <= 7 else MAX_EXPONENT + 1
            if power > MAX_EXPONENT:
                raise ValueError(f"exponent too large in {text!r}")
            value *= 10**power
        return -value if sign == "-" else value

    m = _RADIX_RE.fullmatch(text)
    if m is None:
        return None
    prefix, sign, digits = m.groups()
    radix = RADIXES[prefix.lower()]
    if not digits or not all(c in _RADIX_DIGITS[radix] for c in digits):
        raise ValueError(f"invalid digits for radix {radix} in {text!r}")
    value = parse_decimal(digits) if radix == 10 else int(digits, radix)
    return -value if sign == "-" else value


def classify_atom(text: str, span: Span | None = None, config: ReadConfig | None = None) -> Value:
    """Turn a raw ATOM lexeme into a value.

    Args:
        text: The lexeme
        span: Where it was read (attached to the value and to errors)
        config: Active read configuration (defaults to ReadConfig())

    Raises:
        TokenizeError: INVALID_NUMBER_SYNTAX for bad radix digits and a
            bare ``.``; INVALID_HASH_SYNTAX for unknown ``#`` lexemes.
    """
    if config is None:
        config = ReadConfig()

    # 1. Numbers
    first = text[0]
    if first in "+-0123456789#":
        try:
            number = parse_integer(text)
        except ValueError as e:
            raise TokenizeError(TokenizeErrorKind.INVALID_NUMBER_SYNTAX, _require(span), str(e)) from None
        if number is not None:
            return Integer(number, span=span)

    if first == "#":
        # 2. Booleans
        flag = SHORT_BOOLEANS.get(text)
        if flag is None and config.long_booleans:
            flag = LONG_BOOLEANS.get(text)
        if flag is not None:
            return Boolean(flag, span=span)
        # 4. Unknown hash syntax
        raise TokenizeError(TokenizeErrorKind.INVALID_HASH_SYNTAX, _require(span), text)

    # 3. Colon keywords
    if config.colon_keywords and len(text) > 1:
        if first == ":":
            return Keyword(text[1:], KeywordStyle.PREFIX, span=span)
        if text[-1] == ":":
            return Keyword(text[:-1], KeywordStyle.SUFFIX, span=span)

    # 4. Bare dot (the parser handles it inside lists)
    if text == ".":
        raise TokenizeError(
            TokenizeErrorKind.INVALID_NUMBER_SYNTAX, _require(span), "'.' outside of a list"
        )

    # 5. Everything else
    return Symbol.of(text, span=span)


def is_plain_symbol_text(text: str, config: ReadConfig | None = None) -> bool:
    """Whether ``text`` reads back as a symbol when written verbatim.

    Only the classification is checked here; the printer checks for
    delimiters and whitespace itself.
    """
    if not text or text[0] == "#" or text == ".":
        return False
    try:
        if parse_integer(text) is not None:
            return False
    except ValueError:
        return False
    if config is None:
        config = ReadConfig()
    if config.colon_keywords and len(text) > 1:
        return text[0] != ":" and text[-1] != ":"
    return True


def _require(span: Span | None) -> Span:
    return span if span is not None else Span.at(START)
