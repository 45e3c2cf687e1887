"""Parsing support for the sexpstream parser.

- `classify_atom`: Decides what a raw ATOM lexeme denotes
- `FrameStack`: Explicit stack of open lists, quotes and datum comments

Public API:
classify_atom: Atom lexeme to Integer / Boolean / Keyword / Symbol
is_plain_symbol_text: Whether a symbol can be printed without ``|...|``
ListFrame, PrefixFrame, FrameStack: Parser stack frames

"""

from sexpstream.parsing.atoms import classify_atom, is_plain_symbol_text, parse_integer
from sexpstream.parsing.frames import FrameStack, ListFrame, PrefixFrame

__all__ = [
    "classify_atom",
    "is_plain_symbol_text",
    "parse_integer",
    "FrameStack",
    "ListFrame",
    "PrefixFrame",
]
