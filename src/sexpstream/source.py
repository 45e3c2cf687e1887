"""Chunk sources: adapt buffers, files and iterables to one pull interface.

The tokenizer asks its source for the next chunk only when every buffered
character has been consumed. A source may block (files, sockets); it
returns None once exhausted.

Example:
    >>> src = open_source(b"(a b)")
    >>> src.read_chunk()
    b'(a b)'
    >>> src.read_chunk() is None
    True

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import IO, Protocol, runtime_checkable

DEFAULT_CHUNK_SIZE = 64 * 1024

Chunk = bytes | str


@runtime_checkable
class ChunkSource(Protocol):
    """Protocol for anything that hands out input chunks.

    ``read_chunk`` returns bytes or text, or None when exhausted. It may
    raise OSError; the tokenizer reports that as IoError.

    """

    def read_chunk(self) -> Chunk | None: ...


class BufferSource:
    """A complete in-memory buffer, handed out in one piece."""

    __slots__ = ("_data",)

    def __init__(self, data: Chunk) -> None:
        self._data: Chunk | None = data

    def read_chunk(self) -> Chunk | None:
        data, self._data = self._data, None
        return data or None


class FileSource:
    """Reads a binary or text file object in ``chunk_size`` pieces."""

    __slots__ = ("_fp", "_chunk_size")

    def __init__(self, fp: IO[bytes] | IO[str], chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._fp = fp
        self._chunk_size = chunk_size

    def read_chunk(self) -> Chunk | None:
        data = self._fp.read(self._chunk_size)
        return data or None


class IterableSource:
    """Pulls chunks from an iterable (generators, socket readers, ...)."""

    __slots__ = ("_chunks",)

    def __init__(self, chunks: Iterable[Chunk]) -> None:
        self._chunks: Iterator[Chunk] = iter(chunks)

    def read_chunk(self) -> Chunk | None:
        for chunk in self._chunks:
            if chunk:
                return chunk
        return None


def open_source(obj: object, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ChunkSource:
    """Wrap ``obj`` in the matching ChunkSource.

    Args:
        obj: A str, bytes-like object, file-like object with ``read``,
            iterable of chunks, or an existing ChunkSource.
        chunk_size: Read size for file-like objects.

    Returns:
        A ChunkSource over ``obj``.

    Raises:
        TypeError: If ``obj`` is none of the supported kinds.
    """
    if isinstance(obj, ChunkSource):
        return obj
    if isinstance(obj, str | bytes):
        return BufferSource(obj)
    if isinstance(obj, bytearray | memoryview):
        return BufferSource(bytes(obj))
    if hasattr(obj, "read"):
        return FileSource(obj, chunk_size)  # type: ignore[arg-type]
    if isinstance(obj, Iterable):
        return IterableSource(obj)
    raise TypeError(f"cannot read S-expressions from {type(obj).__name__}")
