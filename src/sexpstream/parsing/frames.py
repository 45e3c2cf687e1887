"""Frame stack for the incremental parser.

The parser never recurses. Every open bracket, quote marker and datum
comment pushes a frame; a completed datum is handed to the innermost
frame. The stack lives on the Parser instance, so parsing can stop at any
token boundary (NEED_INPUT) and resume later.

Usage:
    stack = FrameStack()
    stack.push(ListFrame(BracketKind.ROUND, open_token))
    stack.top.accept(value)
    frame = stack.pop()
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sexpstream.errors import ParseError, ParseErrorKind
from sexpstream.nodes import Value
from sexpstream.tokens import BracketKind, QuoteKind, Token, TokenType


@dataclass(slots=True)
class ListFrame:
    """An open list or vector collecting its elements.

    Attributes:
        bracket: Kind of the opening bracket
        open_token: The OPEN token (for spans and end-of-input errors)
        items: Elements read so far (before the dot, if any)
        dot: The ``.`` token once seen
        tail: The single datum after the dot

    """

    bracket: BracketKind
    open_token: Token
    items: list[Value] = field(default_factory=list)
    dot: Token | None = None
    tail: Value | None = None

    @property
    def token(self) -> Token:
        return self.open_token

    def accept(self, value: Value) -> None:
        """Add a completed datum."""
        if self.dot is None:
            self.items.append(value)
        elif self.tail is None:
            self.tail = value
        else:
            raise ParseError(
                ParseErrorKind.MALFORMED_DOT_NOTATION,
                value.span or self.dot.span,
                "more than one datum after '.'",
            )

    def mark_dot(self, token: Token) -> None:
        """Record a ``.`` separator, validating where it may appear."""
        if self.bracket is not BracketKind.ROUND:
            detail = f"'.' is not allowed in {self.bracket.opening}...{self.bracket.closing}"
        elif not self.items:
            detail = "'.' needs a datum before it"
        elif self.dot is not None:
            detail = "more than one '.' in a list"
        else:
            self.dot = token
            return
        raise ParseError(ParseErrorKind.MALFORMED_DOT_NOTATION, token.span, detail)


@dataclass(slots=True)
class PrefixFrame:
    """A quote marker or ``#;`` waiting for the datum it applies to."""

    token: Token

    @property
    def is_datum_comment(self) -> bool:
        return self.token.type is TokenType.DATUM_COMMENT

    @property
    def quote_kind(self) -> QuoteKind:
        kind = self.token.kind
        assert isinstance(kind, QuoteKind)
        return kind


Frame = ListFrame | PrefixFrame


@dataclass
class FrameStack:
    """Stack of open frames, innermost last.

    Invariant: ``list_depth`` equals the number of ListFrames on the stack.

    """

    _stack: list[Frame] = field(default_factory=list)
    list_depth: int = 0

    def push(self, frame: Frame) -> None:
        self._stack.append(frame)
        if isinstance(frame, ListFrame):
            self.list_depth += 1

    def pop(self) -> Frame:
        frame = self._stack.pop()
        if isinstance(frame, ListFrame):
            self.list_depth -= 1
        return frame

    @property
    def top(self) -> Frame:
        return self._stack[-1]

    def clear(self) -> int:
        """Drop every frame; returns how many were dropped."""
        dropped = len(self._stack)
        self._stack.clear()
        self.list_depth = 0
        return dropped

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)
