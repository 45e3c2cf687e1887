"""StringBuilder for O(n) text accumulation.

The printer produces many small fragments (brackets, single spaces,
atoms). Appending them to a list and joining once keeps ``dumps`` linear
in the size of the output.

Thread Safety:
StringBuilder instances are local to each dumps() call.
No shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterable


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("(").extend(["a", " ", "b"]).append(")")
            StringBuilder(4 parts)
            >>> sb.build()
            '(a b)'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append one fragment (empty fragments are skipped)."""
        if s:
            self._parts.append(s)
        return self

    def append_line(self, s: str = "") -> StringBuilder:
        """Append a fragment followed by a newline."""
        if s:
            self._parts.append(s)
        self._parts.append("\n")
        return self

    def extend(self, fragments: Iterable[str]) -> StringBuilder:
        """Append every fragment of an iterable, lazily consumed."""
        self._parts.extend(s for s in fragments if s)
        return self

    def build(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        """Number of fragments (not characters)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)

    def __repr__(self) -> str:
        return f"StringBuilder({len(self._parts)} parts)"
