"""Process-wide symbol interning.

Every distinct symbol text maps to exactly one SymbolName handle for the
lifetime of the process, so symbol equality is an identity check.

Thread Safety:
Lookups of already-interned names take no lock. Insertions are
double-checked under a module lock, so two threads interning the same
text always receive the same handle.

"""

from __future__ import annotations

import threading
from typing import Final


class SymbolName:
    """Canonical handle for one symbol text.

    Create through ``intern``; direct construction is refused. Handles
    compare and hash by identity.

    """

    __slots__ = ("text", "__weakref__")

    text: str

    def __new__(cls, text: str) -> SymbolName:
        raise TypeError("use sexpstream.symbols.intern() to create symbol names")

    @classmethod
    def _create(cls, text: str) -> SymbolName:
        handle = object.__new__(cls)
        object.__setattr__(handle, "text", text)
        return handle

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("SymbolName is immutable")

    def __reduce__(self) -> tuple:
        return (intern, (self.text,))

    def __repr__(self) -> str:
        return f"SymbolName({self.text!r})"

    def __str__(self) -> str:
        return self.text


_TABLE: Final[dict[str, SymbolName]] = {}
_LOCK: Final = threading.Lock()


def intern(text: str) -> SymbolName:
    """Return the canonical handle for ``text``, creating it on first use.

    Example:
        >>> intern("lambda") is intern("lambda")
        True
    """
    handle = _TABLE.get(text)
    if handle is not None:
        return handle
    with _LOCK:
        handle = _TABLE.get(text)
        if handle is None:
            handle = SymbolName._create(text)
            _TABLE[text] = handle
        return handle


def lookup(text: str) -> SymbolName | None:
    """Return the handle for ``text`` if it has been interned."""
    return _TABLE.get(text)


def table_size() -> int:
    """Number of interned symbols."""
    return len(_TABLE)
