"""Structural dump of value trees.

``dump`` rewrites a value into a plain list structure that spells out
every node type, e.g. ``"hi"`` becomes ``(string 104 105)``. Comparing
dumps is a dialect-neutral way to check that two readers agree on a
parse, independent of how either prints its values.

Format:
    Boolean        true / false
    Integer        (number N)
    Character      (integer->char N)
    String         (string c...)     code points
    Symbol         (symbol c...)
    Keyword        (keyword c...)    #:name
                   (keyword1 c...)   :name
                   (keyword2 c...)   name:
    ProperList     (list d...)       same bracket kind as the input
    ImproperList   (improper-list d... tail)
    Vector         (vector d...)

Nothing in the reader or printer depends on this module.
"""

from __future__ import annotations

from collections.abc import Iterable

from sexpstream.nodes import (
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
)
from sexpstream.printer import dumps
from sexpstream.tokens import BracketKind

_KEYWORD_TAGS = {
    KeywordStyle.HASH_COLON: "keyword",
    KeywordStyle.PREFIX: "keyword1",
    KeywordStyle.SUFFIX: "keyword2",
}


def _form(head: str, items: Iterable[Value], bracket: BracketKind = BracketKind.ROUND) -> ProperList:
    return ProperList((Symbol.of(head), *items), bracket)


def _code_points(head: str, text: str) -> ProperList:
    return _form(head, (Integer(ord(c)) for c in text))


def _dump_atom(value: Value) -> Value:
    match value:
        case Boolean(value=flag):
            return Symbol.of("true" if flag else "false")
        case Integer():
            return _form("number", (Integer(value.value),))
        case Character(value=char):
            return _form("integer->char", (Integer(ord(char)),))
        case String(value=text):
            return _code_points("string", text)
        case Symbol():
            return _code_points("symbol", value.text)
        case Keyword(name=name, style=style):
            return _code_points(_KEYWORD_TAGS[style], name)
    raise TypeError(f"cannot dump {type(value).__name__}")


def dump(value: Value) -> Value:
    """Structural dump of ``value`` (see module docstring).

    Deeply nested input is handled without recursion.

    Example:
        >>> from sexpstream.nodes import Character, make_list
        >>> dump_text(make_list([Character("a")]))
        '(list (integer->char 97))'
    """
    # Post-order walk: a compound is revisited once its children are dumped
    done: list[list[Value]] = [[]]
    stack: list[tuple[Value, bool]] = [(value, False)]
    while stack:
        node, children_done = stack.pop()
        if not isinstance(node, Compound):
            done[-1].append(_dump_atom(node))
            continue
        if not children_done:
            stack.append((node, True))
            done.append([])
            children = list(node.items)
            if isinstance(node, ImproperList):
                children.append(node.tail)
            stack.extend((child, False) for child in reversed(children))
            continue
        dumped = done.pop()
        if isinstance(node, Vector):
            done[-1].append(_form("vector", dumped))
        elif isinstance(node, ImproperList):
            done[-1].append(_form("improper-list", dumped))
        else:
            assert isinstance(node, ProperList)
            done[-1].append(_form("list", dumped, node.bracket))
    return done[0][0]


def dump_text(value: Value) -> str:
    """Printed form of ``dump(value)``."""
    return dumps(dump(value))
