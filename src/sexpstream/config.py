"""ContextVar-based read configuration for sexpstream.

Provides thread-local configuration using Python's ContextVars (PEP 567).
The tokenizer and parser capture the active config when they are created;
the printer reads it on each call.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Through the Reader class
    reader = Reader(ReadConfig(colon_keywords=True))
    values = reader.read_all("(:key value)")

    # Direct tokenizer/parser usage
    from sexpstream.config import ReadConfig, read_config_context

    with read_config_context(ReadConfig(retain_comments=True)):
        tokens = list(Tokenizer("; hi\\n(a)").tokenize())

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sexpstream.location import Span
    from sexpstream.nodes import Value
    from sexpstream.tokens import QuoteKind

QuoteExpander = Callable[["QuoteKind", "Value", "Span"], "Value"]


@dataclass(frozen=True, slots=True)
class ReadConfig:
    """Immutable reader/printer configuration.

    Attributes:
        retain_whitespace: Emit WHITESPACE tokens from the tokenizer
        retain_comments: Emit COMMENT tokens from the tokenizer (the
            parser always skips them)
        allow_improper_lists: Accept ``(a . b)`` where b is not a list
        colon_keywords: Read ``:name`` and ``name:`` atoms as keywords
        long_booleans: Accept ``#true`` and ``#false``
        hex_escape_terminator: Character ending a ``\\x`` string escape
            (R7RS uses ``;``); None reads up to hex_escape_max_digits digits
        hex_escape_max_digits: Longest accepted ``\\x`` escape
        max_depth: Cap on list nesting depth (None = memory bound)
        quote_expander: Builds the value for ``'x``-style forms; None
            produces ``(quote x)`` and friends

    """

    retain_whitespace: bool = False
    retain_comments: bool = False
    allow_improper_lists: bool = True
    colon_keywords: bool = False
    long_booleans: bool = True
    hex_escape_terminator: str | None = ";"
    hex_escape_max_digits: int = 8
    max_depth: int | None = None
    quote_expander: QuoteExpander | None = None

    @classmethod
    def from_dict(cls, config_dict: dict) -> ReadConfig:
        """Create ReadConfig from dictionary.

        Only includes keys that are valid ReadConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = ReadConfig.from_dict({
            ...     "colon_keywords": True,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.colon_keywords
            True

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ReadConfig = ReadConfig()

_read_config: ContextVar[ReadConfig] = ContextVar(
    "read_config",
    default=_DEFAULT_CONFIG,
)


def get_read_config() -> ReadConfig:
    """Get current read configuration (thread-local)."""
    return _read_config.get()


def set_read_config(config: ReadConfig) -> None:
    """Set read configuration for current context.

    Only affects the current thread's context. Other threads are unaffected.
    """
    _read_config.set(config)


def reset_read_config() -> None:
    """Reset to default configuration."""
    _read_config.set(_DEFAULT_CONFIG)


@contextmanager
def read_config_context(config: ReadConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Properly restores the previous config even if an exception is raised.

    Example:
        >>> with read_config_context(ReadConfig(colon_keywords=True)):
        ...     values = read_all(":a")
        >>> # Automatically reset to previous config

    """
    previous = _read_config.get()
    _read_config.set(config)
    try:
        yield
    finally:
        _read_config.set(previous)


__all__ = [
    "QuoteExpander",
    "ReadConfig",
    "get_read_config",
    "set_read_config",
    "reset_read_config",
    "read_config_context",
]
