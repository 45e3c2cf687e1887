"""
sexpstream: Streaming S-expression reader and printer

Reads S-expressions from in-memory buffers or from input that arrives a
chunk at a time (files, sockets, generators) without buffering the whole
input, and prints value trees back as a lazy stream of tokens and text.
Zero runtime dependencies.

Quick Start:
    >>> from sexpstream import read_all, dumps
    >>> values = read_all("(define (sq x) (* x x)) 'done")
    >>> dumps(values[1])
    '(quote done)'

    >>> # Incremental input
    >>> from sexpstream import Parser, NEED_INPUT
    >>> parser = Parser()
    >>> parser.feed(b"(a ")
    >>> parser.read() is NEED_INPUT
    True

    >>> # Dialect options
    >>> from sexpstream import Reader, ReadConfig
    >>> reader = Reader(ReadConfig(colon_keywords=True))
    >>> reader.read_all(":key")
    [Keyword(name='key', style=<KeywordStyle.PREFIX: ':'>)]
"""

from collections.abc import Iterable, Iterator
from typing import IO

from sexpstream.config import (
    ReadConfig,
    get_read_config,
    read_config_context,
    reset_read_config,
    set_read_config,
)
from sexpstream.dump import dump, dump_text
from sexpstream.errors import (
    DecodeError,
    IoError,
    ParseError,
    ParseErrorKind,
    SexpError,
    TokenizeError,
    TokenizeErrorKind,
)
from sexpstream.lexer import Tokenizer
from sexpstream.location import Position, Span
from sexpstream.nodes import (
    FALSE,
    NIL,
    TRUE,
    Atom,
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
    make_dotted,
    make_list,
)
from sexpstream.parser import Parser, expand_quote
from sexpstream.printer import Printer, dumps, iter_text, iter_tokens, render_token
from sexpstream.printer import write as _write_value
from sexpstream.source import DEFAULT_CHUNK_SIZE, ChunkSource, open_source
from sexpstream.symbols import SymbolName, intern
from sexpstream.tokens import (
    END_OF_INPUT,
    NEED_INPUT,
    BracketKind,
    QuoteKind,
    Signal,
    Token,
    TokenType,
)
from sexpstream.utils.logger import get_logger

__version__ = "0.1.0"

logger = get_logger(__name__)


def tokenize(source: object, *, source_file: str | None = None) -> Iterator[Token]:
    """Tokenize ``source`` lazily, up to and including EOF.

    Args:
        source: str, bytes, file object or iterable of chunks
        source_file: Optional source file path for spans and errors
    """
    return Tokenizer(source, source_file=source_file).tokenize()


def read(source: object, *, source_file: str | None = None) -> Value | Signal:
    """Read the first value of ``source`` (END_OF_INPUT if there is none).

    Example:
        >>> read("[1 2] ignored")
        ProperList(items=(Integer(value=1), Integer(value=2)), bracket=<BracketKind.SQUARE: ('[', ']')>)
    """
    return Parser(source, source_file=source_file).read()


def read_all(source: object, *, source_file: str | None = None) -> list[Value]:
    """Read every value of ``source``."""
    return list(Parser(source, source_file=source_file).values())


def iter_read(source: object, *, source_file: str | None = None) -> Iterator[Value]:
    """Lazily read the values of ``source``.

    Values before a syntax error are yielded before the error is raised.
    """
    return Parser(source, source_file=source_file).values()


def read_file(path: str, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[Value]:
    """Read every value of a UTF-8 file, streaming it in chunks.

    Raises:
        IoError: The file cannot be opened or read.
        SexpError: Any read error; its span names ``path``.
    """
    logger.debug("Reading %s", path)
    try:
        fp = open(path, "rb")
    except OSError as e:
        raise IoError(f"cannot open file: {e.strerror or e}", Span.at(Position.START, path)) from e
    with fp:
        try:
            return list(Parser(fp, source_file=path, chunk_size=chunk_size).values())
        except SexpError as e:
            e.with_source_file(path)
            raise


def write(value: Value, fp: IO[str]) -> None:
    """Write the printed form of ``value`` to a text file object."""
    _write_value(value, fp)


def write_all(values: Iterable[Value], fp: IO[str]) -> None:
    """Write values one per line, separated by blank lines."""
    for index, value in enumerate(values):
        if index:
            fp.write("\n")
        _write_value(value, fp)
        fp.write("\n")


def write_file(path: str, values: Iterable[Value]) -> None:
    """Write values to a UTF-8 file (see write_all).

    Raises:
        IoError: The file cannot be opened or written.
    """
    logger.debug("Writing %s", path)
    try:
        with open(path, "w", encoding="utf-8") as fp:
            write_all(values, fp)
    except OSError as e:
        raise IoError(f"cannot write file: {e.strerror or e}", Span.at(Position.START, path)) from e


class Reader:
    """Reader and printer bound to one configuration.

    Usage:
        >>> reader = Reader(ReadConfig(allow_improper_lists=False))
        >>> reader.read_all("(a b)")
        [ProperList(...)]

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Reader instances concurrently from different threads.

    """

    __slots__ = ("_config",)

    def __init__(self, config: ReadConfig | None = None) -> None:
        self._config = config if config is not None else ReadConfig()

    @property
    def config(self) -> ReadConfig:
        return self._config

    def read_all(self, source: object, *, source_file: str | None = None) -> list[Value]:
        """Read every value of ``source`` under this reader's config."""
        with read_config_context(self._config):
            return list(Parser(source, source_file=source_file).values())

    def iter_read(self, source: object, *, source_file: str | None = None) -> Iterator[Value]:
        """Lazily read ``source``; the config is captured up front."""
        with read_config_context(self._config):
            parser = Parser(source, source_file=source_file)
        return parser.values()

    def dumps(self, value: Value) -> str:
        """Print ``value`` under this reader's config."""
        with read_config_context(self._config):
            return dumps(value)


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # Core API
    "tokenize",
    "read",
    "read_all",
    "iter_read",
    "read_file",
    "write",
    "write_all",
    "write_file",
    "dumps",
    "iter_text",
    "iter_tokens",
    "render_token",
    "Reader",
    # Values
    "Value",
    "Atom",
    "Compound",
    "Boolean",
    "Integer",
    "Symbol",
    "Keyword",
    "KeywordStyle",
    "Character",
    "String",
    "ProperList",
    "ImproperList",
    "Vector",
    "make_list",
    "make_dotted",
    "NIL",
    "TRUE",
    "FALSE",
    # Symbols
    "SymbolName",
    "intern",
    # Structural dump
    "dump",
    "dump_text",
    # Components
    "Tokenizer",
    "Parser",
    "Printer",
    "expand_quote",
    "ChunkSource",
    "open_source",
    "DEFAULT_CHUNK_SIZE",
    # Tokens
    "Token",
    "TokenType",
    "BracketKind",
    "QuoteKind",
    "Signal",
    "NEED_INPUT",
    "END_OF_INPUT",
    # Location
    "Position",
    "Span",
    # Errors
    "SexpError",
    "IoError",
    "DecodeError",
    "TokenizeError",
    "TokenizeErrorKind",
    "ParseError",
    "ParseErrorKind",
    # Configuration (ContextVar-based)
    "ReadConfig",
    "get_read_config",
    "set_read_config",
    "reset_read_config",
    "read_config_context",
]
