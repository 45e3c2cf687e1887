"""Incremental UTF-8 decoding for streamed input.

CharDecoder turns byte chunks of arbitrary size into single characters.
A multi-byte sequence split across two chunks is held back until its
remaining bytes arrive, so a character is never handed out half-decoded.

Usage:
    >>> dec = CharDecoder()
    >>> dec.feed(b"a\\xce")
    >>> dec.next_char()
    'a'
    >>> dec.next_char()
    NEED_INPUT
    >>> dec.feed(b"\\xbb")
    >>> dec.next_char()
    'λ'
    >>> dec.finish()
    >>> dec.next_char()
    END_OF_INPUT

Thread Safety:
Decoder instances hold per-stream state. Use one per stream, from one thread.

"""

from __future__ import annotations

import codecs

from sexpstream.errors import DecodeError
from sexpstream.tokens import END_OF_INPUT, NEED_INPUT, Signal


class CharDecoder:
    """Push bytes in, pull characters out.

    ``next_char`` distinguishes "nothing buffered yet" (NEED_INPUT) from
    "source exhausted" (END_OF_INPUT, only after ``finish``). Invalid
    input raises DecodeError once every character before the bad byte
    has been pulled; after that the decoder stays failed.

    """

    __slots__ = (
        "_decoder",
        "_text",
        "_index",
        "_bytes_fed",
        "_finished",
        "_error",
    )

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._text = ""
        self._index = 0
        self._bytes_fed = 0
        self._finished = False
        self._error: DecodeError | None = None

    @property
    def finished(self) -> bool:
        """Whether the source has signalled end of input."""
        return self._finished

    @property
    def failed(self) -> bool:
        return self._error is not None

    def feed(self, data: bytes | bytearray | memoryview) -> None:
        """Decode another chunk of bytes.

        Args:
            data: Raw bytes; may end in the middle of a character.

        Raises:
            ValueError: If called after finish().
        """
        self._check_open()
        if self._error is not None or not data:
            return
        data = bytes(data)
        pending, _ = self._decoder.getstate()
        base = self._bytes_fed - len(pending)
        self._bytes_fed += len(data)
        try:
            decoded = self._decoder.decode(data)
        except UnicodeDecodeError as exc:
            # Keep what decoded cleanly; the error surfaces after it.
            combined = pending + data
            self._append(combined[: exc.start].decode("utf-8"))
            self._error = DecodeError(base + exc.start, exc.reason)
            return
        self._append(decoded)

    def feed_text(self, text: str) -> None:
        """Accept already-decoded text."""
        self._check_open()
        if self._error is None:
            self._append(text)

    def finish(self) -> None:
        """Signal that no more input will arrive.

        A trailing incomplete sequence becomes a DecodeError at the
        offset of its first byte.
        """
        if self._finished:
            return
        self._finished = True
        if self._error is not None:
            return
        pending, _ = self._decoder.getstate()
        try:
            self._append(self._decoder.decode(b"", final=True))
        except UnicodeDecodeError as exc:
            self._error = DecodeError(
                self._bytes_fed - len(pending) + exc.start,
                "truncated UTF-8 sequence at end of input",
            )

    def next_char(self) -> str | Signal:
        """Pull one character.

        Returns:
            The next character, NEED_INPUT, or END_OF_INPUT.

        Raises:
            DecodeError: When the next byte sequence is invalid.
        """
        if self._index < len(self._text):
            char = self._text[self._index]
            self._index += 1
            return char
        if self._error is not None:
            raise self._error
        return END_OF_INPUT if self._finished else NEED_INPUT

    def _append(self, text: str) -> None:
        if not text:
            return
        if self._index >= len(self._text):
            self._text = text
        else:
            self._text = self._text[self._index :] + text
        self._index = 0

    def _check_open(self) -> None:
        if self._finished:
            raise ValueError("cannot feed a decoder after finish()")
