"""Streaming state-machine tokenizer for sexpstream.

The tokenizer turns a character stream into tokens one character at a
time. It can be fed in arbitrary chunks and suspends (NEED_INPUT) between
them without losing partial tokens.

Architecture:
lexer/
├── __init__.py          # Re-exports Tokenizer, LexerMode
├── core.py              # Tokenizer class (mixin composition + driver loop)
├── modes.py             # LexerMode enum, delimiter and escape tables
└── scanners/            # Mode-specific scanners
    ├── base.py          # Shared host attributes and token helpers
    ├── atom.py          # Atoms, whitespace, unquote
    ├── string.py        # Strings, |symbols|, #:|keywords|
    ├── comment.py       # Line and nested block comments
    └── hash.py          # '#' dispatch and character literals

Usage:
    >>> from sexpstream.lexer import Tokenizer
    >>> for token in Tokenizer("(a 'b)").tokenize():
    ...     print(token)
Token(OPEN, '(', 1:1)
Token(ATOM, 'a', 1:2)
Token(QUOTE, "'", 1:4)
Token(ATOM, 'b', 1:5)
Token(CLOSE, ')', 1:6)
Token(EOF, '', 1:7)

"""

from sexpstream.lexer.core import Tokenizer
from sexpstream.lexer.modes import LexerMode

__all__ = ["Tokenizer", "LexerMode"]
