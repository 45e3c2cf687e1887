"""Typed value nodes for sexpstream.

All nodes are frozen dataclasses with slots for:
- Immutability: Safe sharing across threads once parsed
- Structural equality: two trees are equal iff they have the same shape
  and equal leaves; source spans never take part in comparisons
- Pattern matching: match statements work naturally

Node Hierarchy:
Value (base)
├── Atom
│   ├── Boolean
│   ├── Integer
│   ├── Symbol        (holds an interned SymbolName)
│   ├── Keyword
│   ├── Character
│   └── String
└── Compound
    ├── ProperList
    ├── ImproperList  (items + tail, dotted-pair notation)
    └── Vector

Parents own their children exclusively; trees are acyclic.

"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from sexpstream.location import Span
from sexpstream.symbols import SymbolName, intern
from sexpstream.tokens import BracketKind

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Value:
    """Base class for all value nodes.

    ``span`` records where the value was read from (None for values built
    in code). It is keyword-only and excluded from equality and repr.

    """

    span: Span | None = field(default=None, compare=False, repr=False, kw_only=True)

    def __str__(self) -> str:
        from sexpstream.printer import dumps

        return dumps(self)


@dataclass(frozen=True, slots=True)
class Atom(Value):
    """Leaf values."""


@dataclass(frozen=True, slots=True)
class Compound(Value):
    """Values with children.

    Equality and hashing walk the tree with an explicit stack, so values
    nested deeper than the interpreter's recursion limit still compare.

    """

    items: tuple[Value, ...]

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        assert isinstance(other, Compound)
        pending: list[tuple[Value, Value]] = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if left.__class__ is not right.__class__:
                return False
            if not isinstance(left, Compound):
                if left != right:
                    return False
                continue
            assert isinstance(right, Compound)
            if _shape(left) != _shape(right):
                return False
            pending.extend(zip(_children(left), _children(right), strict=True))
        return True

    def __hash__(self) -> int:
        # Post-order: a compound is hashed once its children are
        done: list[list[int]] = [[]]
        stack: list[tuple[Value, bool]] = [(self, False)]
        while stack:
            node, children_done = stack.pop()
            if not isinstance(node, Compound):
                done[-1].append(hash(node))
            elif not children_done:
                stack.append((node, True))
                done.append([])
                stack.extend((child, False) for child in reversed(_children(node)))
            else:
                done[-1].append(hash((node.__class__, _shape(node), *done.pop())))
        return done[0][0]


def _children(value: Compound) -> tuple[Value, ...]:
    if isinstance(value, ImproperList):
        return (*value.items, value.tail)
    return value.items


def _shape(value: Compound) -> tuple[object, ...]:
    if isinstance(value, ProperList):
        return (len(value.items), value.bracket)
    return (len(value.items),)


# =============================================================================
# Atoms
# =============================================================================


@dataclass(frozen=True, slots=True)
class Boolean(Atom):
    """``#t`` / ``#f``."""

    value: bool


@dataclass(frozen=True, slots=True)
class Integer(Atom):
    """Exact integer of arbitrary precision."""

    value: int


@dataclass(frozen=True, slots=True)
class Symbol(Atom):
    """A symbol; equality is identity of the interned name.

    Use ``Symbol.of("text")`` to build one from text.

    """

    name: SymbolName

    @classmethod
    def of(cls, text: str, *, span: Span | None = None) -> Symbol:
        return cls(intern(text), span=span)

    @property
    def text(self) -> str:
        return self.name.text


class KeywordStyle(Enum):
    """How a keyword is spelled in source."""

    HASH_COLON = "#:"  # #:name
    PREFIX = ":"  # :name
    SUFFIX = "suffix"  # name:


@dataclass(frozen=True, slots=True)
class Keyword(Atom):
    """A keyword literal (dialect-specific spelling kept in ``style``)."""

    name: str
    style: KeywordStyle = KeywordStyle.HASH_COLON


@dataclass(frozen=True, slots=True)
class Character(Atom):
    """A single Unicode scalar value."""

    value: str

    def __post_init__(self) -> None:
        if len(self.value) != 1:
            raise ValueError(f"Character needs exactly one code point, got {self.value!r}")


@dataclass(frozen=True, slots=True)
class String(Atom):
    """String literal (decoded content)."""

    value: str


# =============================================================================
# Compound values
# =============================================================================


@dataclass(frozen=True, slots=True, eq=False)
class ProperList(Compound):
    """``(a b c)``; ``[...]`` and ``{...}`` keep their bracket kind."""

    bracket: BracketKind = BracketKind.ROUND

    def __post_init__(self) -> None:
        if self.bracket is BracketKind.VECTOR:
            raise ValueError("use Vector for #( ... ) values")


@dataclass(frozen=True, slots=True, eq=False)
class ImproperList(Compound):
    """``(a b . tail)``: at least one item followed by a non-list tail.

    Dotted pairs are always round. The tail is never an ImproperList or a
    round ProperList; build dotted values with ``make_dotted`` to get that
    folding for free.

    """

    tail: Value

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("ImproperList needs at least one item before the dot")
        if isinstance(self.tail, ImproperList):
            raise ValueError("ImproperList tail must not be an ImproperList")
        if isinstance(self.tail, ProperList) and self.tail.bracket is BracketKind.ROUND:
            raise ValueError("ImproperList tail must not be a round list; use make_dotted")


@dataclass(frozen=True, slots=True, eq=False)
class Vector(Compound):
    """``#(a b c)``."""


def make_list(items: Iterable[Value], *, span: Span | None = None) -> ProperList:
    """Build a round proper list."""
    return ProperList(tuple(items), span=span)


def make_dotted(
    items: Sequence[Value],
    tail: Value,
    *,
    span: Span | None = None,
) -> ProperList | ImproperList:
    """Build ``(items . tail)``, folding list tails into the result.

    ``(a . (b c))`` is the proper list ``(a b c)`` and ``(a . (b . c))``
    is ``(a b . c)``. Only round lists are folded; ``(a . [b])`` keeps the
    square list as an atom-like tail.

    """
    if isinstance(tail, ProperList) and tail.bracket is BracketKind.ROUND:
        return ProperList((*items, *tail.items), span=span)
    if isinstance(tail, ImproperList):
        return ImproperList((*items, *tail.items), tail.tail, span=span)
    return ImproperList(tuple(items), tail, span=span)


NIL = ProperList(())
TRUE = Boolean(True)
FALSE = Boolean(False)
