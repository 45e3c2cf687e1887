"""Token classification across tokenizer modes."""

import pytest

from sexpstream.config import ReadConfig
from sexpstream.errors import TokenizeError, TokenizeErrorKind
from sexpstream.lexer import Tokenizer
from sexpstream.location import Position
from sexpstream.tokens import BracketKind, QuoteKind, TokenType

T = TokenType


def lex(source: str, **options: object) -> list[tuple[TokenType, str]]:
    """(type, value) pairs without the trailing EOF."""
    tokens = list(Tokenizer(source, config=ReadConfig(**options)).tokenize())
    assert tokens[-1].type is T.EOF
    return [(t.type, t.value) for t in tokens[:-1]]


def lex_error(source: str, **options: object) -> TokenizeError:
    with pytest.raises(TokenizeError) as exc_info:
        list(Tokenizer(source, config=ReadConfig(**options)).tokenize())
    return exc_info.value


class TestBrackets:
    """Open and close tokens."""

    def test_all_bracket_kinds(self) -> None:
        assert lex("(a [b] {c})") == [
            (T.OPEN, "("),
            (T.ATOM, "a"),
            (T.OPEN, "["),
            (T.ATOM, "b"),
            (T.CLOSE, "]"),
            (T.OPEN, "{"),
            (T.ATOM, "c"),
            (T.CLOSE, "}"),
            (T.CLOSE, ")"),
        ]

    def test_bracket_kinds_are_attached(self) -> None:
        tokens = list(Tokenizer("[#(}").tokenize())
        assert [t.kind for t in tokens[:-1]] == [
            BracketKind.SQUARE,
            BracketKind.VECTOR,
            BracketKind.CURLY,
        ]

    def test_vector_open(self) -> None:
        assert lex("#(1 2)") == [
            (T.OPEN, "#("),
            (T.ATOM, "1"),
            (T.ATOM, "2"),
            (T.CLOSE, ")"),
        ]


class TestAtoms:
    """Atoms run until a delimiter."""

    def test_atoms_are_raw(self) -> None:
        assert lex("foo -12 1.5 a:b") == [
            (T.ATOM, "foo"),
            (T.ATOM, "-12"),
            (T.ATOM, "1.5"),
            (T.ATOM, "a:b"),
        ]

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ('a"b"', [(T.ATOM, "a"), (T.STRING, "b")]),
            ("a;c", [(T.ATOM, "a")]),
            ("a|b|", [(T.ATOM, "a"), (T.SYMBOL, "b")]),
            ("a'b", [(T.ATOM, "a"), (T.QUOTE, "'"), (T.ATOM, "b")]),
            ("a(b", [(T.ATOM, "a"), (T.OPEN, "("), (T.ATOM, "b")]),
        ],
    )
    def test_delimiters_end_atoms(self, source: str, expected: list) -> None:
        assert lex(source) == expected

    def test_hash_atoms(self) -> None:
        assert lex("#t #false #x1F") == [
            (T.ATOM, "#t"),
            (T.ATOM, "#false"),
            (T.ATOM, "#x1F"),
        ]

    def test_dot_is_an_atom(self) -> None:
        assert lex("(a . b)")[2] == (T.ATOM, ".")


class TestQuotes:
    """Quote markers."""

    def test_all_markers(self) -> None:
        tokens = list(Tokenizer("'a `b ,c ,@d").tokenize())
        quotes = [(t.value, t.kind) for t in tokens if t.type is T.QUOTE]
        assert quotes == [
            ("'", QuoteKind.QUOTE),
            ("`", QuoteKind.QUASIQUOTE),
            (",", QuoteKind.UNQUOTE),
            (",@", QuoteKind.UNQUOTE_SPLICING),
        ]

    def test_comma_at_end_of_input(self) -> None:
        assert lex(",") == [(T.QUOTE, ",")]


class TestStrings:
    """String literals and their escapes."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (r'"a\nb"', "a\nb"),
            (r'"tab\there"', "tab\there"),
            (r'"q\"q"', 'q"q'),
            (r'"back\\slash"', "back\\slash"),
            (r'"\a\b\v\f\0\r"', "\x07\x08\x0b\x0c\x00\r"),
            (r'"\x41;B\U00000043"', "ABC"),
            (r'"\x3bb;"', "λ"),
            ('"raw\nnewline"', "raw\nnewline"),
            ('"a\\   \n   b"', "ab"),
            ('"a\\\n\tb"', "ab"),
            ('""', ""),
        ],
    )
    def test_decoded_content(self, source: str, expected: str) -> None:
        assert lex(source) == [(T.STRING, expected)]

    def test_escaped_delimiter_does_not_terminate(self) -> None:
        assert lex(r'"a\"" b') == [(T.STRING, 'a"'), (T.ATOM, "b")]

    def test_unknown_escape(self) -> None:
        err = lex_error(r'"\q"')
        assert err.kind is TokenizeErrorKind.INVALID_ESCAPE
        assert err.position == Position(1, 3, 2)

    def test_surrogate_escape_is_rejected(self) -> None:
        assert lex_error(r'"\uD800"').kind is TokenizeErrorKind.INVALID_ESCAPE

    def test_out_of_range_escape_is_rejected(self) -> None:
        assert lex_error(r'"\x110000;"').kind is TokenizeErrorKind.INVALID_ESCAPE

    def test_hex_escape_needs_terminator(self) -> None:
        assert lex_error(r'"\x41"').kind is TokenizeErrorKind.INVALID_ESCAPE

    def test_hex_escape_without_terminator_config(self) -> None:
        assert lex(r'"\x41g"', hex_escape_terminator=None) == [(T.STRING, "Ag")]

    def test_hex_escape_digit_limit(self) -> None:
        assert lex(r'"\x0041"', hex_escape_terminator=None, hex_escape_max_digits=2) == [
            (T.STRING, "\x0041")
        ]

    def test_line_continuation_must_end_line(self) -> None:
        assert lex_error('"a\\  b"').kind is TokenizeErrorKind.INVALID_ESCAPE

    def test_unterminated(self) -> None:
        err = lex_error('(a "ab')
        assert err.kind is TokenizeErrorKind.UNTERMINATED_STRING
        assert err.position == Position(1, 4, 3)

    def test_unterminated_inside_escape(self) -> None:
        assert lex_error('"ab\\').kind is TokenizeErrorKind.UNTERMINATED_STRING


class TestQuotedSymbolsAndKeywords:
    """``|symbol|`` and ``#:keyword`` forms."""

    def test_bar_symbol(self) -> None:
        assert lex("|a b|") == [(T.SYMBOL, "a b")]

    def test_bar_symbol_escape(self) -> None:
        assert lex(r"|a\|b|") == [(T.SYMBOL, "a|b")]

    def test_empty_bar_symbol(self) -> None:
        assert lex("||") == [(T.SYMBOL, "")]

    def test_unterminated_bar_symbol(self) -> None:
        assert lex_error("|abc").kind is TokenizeErrorKind.UNTERMINATED_STRING

    def test_keyword(self) -> None:
        assert lex("#:key)") == [(T.KEYWORD, "key"), (T.CLOSE, ")")]

    def test_quoted_keyword(self) -> None:
        tokens = list(Tokenizer("#:|a b|").tokenize())
        assert (tokens[0].type, tokens[0].value) == (T.KEYWORD, "a b")
        assert tokens[0].start == Position(1, 1, 0)

    @pytest.mark.parametrize("source", ["#:", "#: a", "#:)"])
    def test_empty_keyword(self, source: str) -> None:
        assert lex_error(source).kind is TokenizeErrorKind.INVALID_HASH_SYNTAX


class TestCharacters:
    """``#\\`` character literals."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (r"#\a", "a"),
            (r"#\space", " "),
            (r"#\newline", "\n"),
            (r"#\tab", "\t"),
            (r"#\x41", "A"),
            (r"#\x", "x"),
            (r"#\u3bb", "λ"),
            (r"#\λ", "λ"),
            (r"#\(", "("),
            (r"#\;", ";"),
            ("#\\ ", " "),
        ],
    )
    def test_literals(self, source: str, expected: str) -> None:
        assert lex(source) == [(T.CHAR, expected)]

    def test_delimiter_char_is_immediate(self) -> None:
        assert lex(r"(#\))") == [(T.OPEN, "("), (T.CHAR, ")"), (T.CLOSE, ")")]

    @pytest.mark.parametrize("source", [r"#\nope", r"#\xD800", r"#\x110000", "#\\"])
    def test_invalid(self, source: str) -> None:
        assert lex_error(source).kind is TokenizeErrorKind.INVALID_CHARACTER_LITERAL


class TestHashDispatch:
    """Other ``#`` forms."""

    def test_datum_comment_marker(self) -> None:
        assert lex("#;a b") == [(T.DATUM_COMMENT, "#;"), (T.ATOM, "a"), (T.ATOM, "b")]

    @pytest.mark.parametrize("source", ["#", "# a", "#)", '#"x"'])
    def test_bare_hash(self, source: str) -> None:
        assert lex_error(source).kind is TokenizeErrorKind.INVALID_HASH_SYNTAX


class TestComments:
    """Line, block and nested block comments."""

    def test_dropped_by_default(self) -> None:
        assert lex("; c\n(a) #| x |# b") == [
            (T.OPEN, "("),
            (T.ATOM, "a"),
            (T.CLOSE, ")"),
            (T.ATOM, "b"),
        ]

    def test_retained(self) -> None:
        assert lex("; c\n(a) #| x |# b", retain_comments=True) == [
            (T.COMMENT, "; c"),
            (T.OPEN, "("),
            (T.ATOM, "a"),
            (T.CLOSE, ")"),
            (T.COMMENT, "#| x |#"),
            (T.ATOM, "b"),
        ]

    def test_line_comment_at_end_of_input(self) -> None:
        assert lex("a ; trailing", retain_comments=True) == [
            (T.ATOM, "a"),
            (T.COMMENT, "; trailing"),
        ]

    def test_nested_block_comment(self) -> None:
        assert lex("#| a #| b |# c |# x") == [(T.ATOM, "x")]

    def test_unterminated_nested_block_comment(self) -> None:
        err = lex_error("(a) #| a #| b |# c")
        assert err.kind is TokenizeErrorKind.UNTERMINATED_COMMENT
        assert err.position == Position(1, 5, 4)


class TestWhitespace:
    """Whitespace tokens are opt-in."""

    def test_dropped_by_default(self) -> None:
        assert lex("  a \n b  ") == [(T.ATOM, "a"), (T.ATOM, "b")]

    def test_retained(self) -> None:
        assert lex("a  b\n", retain_whitespace=True) == [
            (T.ATOM, "a"),
            (T.WHITESPACE, "  "),
            (T.ATOM, "b"),
            (T.WHITESPACE, "\n"),
        ]


class TestEndOfInput:
    """EOF handling and recovery."""

    def test_empty_input(self) -> None:
        tokens = list(Tokenizer("").tokenize())
        assert [t.type for t in tokens] == [T.EOF]
        assert tokens[0].start == tokens[0].end == Position(1, 1, 0)

    def test_eof_repeats(self) -> None:
        tok = Tokenizer("a")
        assert tok.next_token().type is T.ATOM
        assert tok.next_token().type is T.EOF
        assert tok.next_token().type is T.EOF

    def test_continues_after_error(self) -> None:
        tok = Tokenizer("#\\nope (a)")
        with pytest.raises(TokenizeError):
            tok.next_token()
        assert [t.type for t in tok.tokenize()] == [T.OPEN, T.ATOM, T.CLOSE, T.EOF]

    def test_iteration(self) -> None:
        assert [t.type for t in Tokenizer("a")] == [T.ATOM, T.EOF]
