"""Mode-specific scanners for the sexpstream tokenizer.

Each scanner is a mixin that provides the scanning logic for a group of
tokenizer modes (atoms, delimited literals, comments, hash dispatch).
"""

from __future__ import annotations

from sexpstream.lexer.scanners.atom import AtomScannerMixin
from sexpstream.lexer.scanners.comment import CommentScannerMixin
from sexpstream.lexer.scanners.hash import HashScannerMixin, resolve_char_name
from sexpstream.lexer.scanners.string import StringScannerMixin

__all__ = [
    "AtomScannerMixin",
    "CommentScannerMixin",
    "HashScannerMixin",
    "StringScannerMixin",
    "resolve_char_name",
]
