"""Decimal conversions for integers of any size.

``int(str)`` and ``str(int)`` refuse decimal strings longer than
``sys.get_int_max_str_digits()`` (4300 by default). These helpers split
long inputs so reading and printing stay arbitrary-precision without
touching the interpreter-wide limit.
"""

from __future__ import annotations

# Comfortably below the default interpreter limit
_CHUNK_DIGITS = 4000
_CHUNK_LIMIT = 10**_CHUNK_DIGITS


def parse_decimal(digits: str) -> int:
    """Value of a non-empty run of ASCII decimal digits.

    >>> parse_decimal("0042")
    42
    """
    if len(digits) <= _CHUNK_DIGITS:
        return int(digits)
    half = len(digits) // 2
    return parse_decimal(digits[:-half]) * 10**half + parse_decimal(digits[-half:])


def format_decimal(value: int) -> str:
    """Decimal text of ``value``.

    >>> format_decimal(-12)
    '-12'
    """
    if value < 0:
        return "-" + format_decimal(-value)
    if value < _CHUNK_LIMIT:
        return str(value)
    # log10(2) ~= 0.30103; may overestimate by one digit, which is harmless
    half = (value.bit_length() * 30103 // 100000 + 1) // 2
    high, low = divmod(value, 10**half)
    return format_decimal(high) + format_decimal(low).rjust(half, "0")
