"""Tests for the top-level convenience API."""

import io

import pytest

from sexpstream import (
    END_OF_INPUT,
    IoError,
    ParseError,
    TokenizeError,
    iter_read,
    read,
    read_all,
    read_file,
    tokenize,
    write,
    write_all,
    write_file,
)
from sexpstream.location import Position
from sexpstream.nodes import Integer, ProperList, String, Symbol, make_list
from sexpstream.tokens import TokenType


class TestReading:
    """read, read_all, iter_read, tokenize."""

    def test_tokenize(self) -> None:
        assert [t.type for t in tokenize("(a)")] == [
            TokenType.OPEN,
            TokenType.ATOM,
            TokenType.CLOSE,
            TokenType.EOF,
        ]

    def test_read_first_value_only(self) -> None:
        assert read("1 2") == Integer(1)

    def test_read_empty(self) -> None:
        assert read("") is END_OF_INPUT

    def test_read_all(self) -> None:
        assert read_all("1 2 3") == [Integer(1), Integer(2), Integer(3)]

    def test_read_all_from_bytes_and_files(self) -> None:
        assert read_all(b"(a)") == read_all(io.BytesIO(b"(a)")) == [make_list([Symbol.of("a")])]

    def test_iter_read_is_lazy(self) -> None:
        values = iter_read("a (b")
        assert next(values) == Symbol.of("a")
        with pytest.raises(ParseError):
            next(values)

    def test_source_file_in_errors(self) -> None:
        with pytest.raises(TokenizeError) as exc_info:
            read('"abc', source_file="x.scm")
        assert str(exc_info.value).startswith("x.scm:1:1 ")


class TestFiles:
    """read_file and write_file."""

    def test_read_file_in_small_chunks(self, tmp_path) -> None:
        path = tmp_path / "data.scm"
        path.write_bytes('(λ "€") ; done\n42\n'.encode())
        values = read_file(str(path), chunk_size=1)
        assert values == [make_list([Symbol.of("λ"), String("€")]), Integer(42)]
        assert values[1].span.source_file == str(path)
        assert values[1].span.start == Position(2, 1, 18)

    def test_read_file_error_names_file(self, tmp_path) -> None:
        path = tmp_path / "bad.scm"
        path.write_text("(a\n  (b c)\n")
        with pytest.raises(ParseError) as exc_info:
            read_file(str(path))
        assert exc_info.value.source_file == str(path)
        assert str(exc_info.value).startswith(f"{path}:1:1 ")

    def test_read_missing_file(self, tmp_path) -> None:
        path = str(tmp_path / "missing.scm")
        with pytest.raises(IoError) as exc_info:
            read_file(path)
        assert exc_info.value.source_file == path
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_write_file_round_trip(self, tmp_path) -> None:
        path = str(tmp_path / "out.scm")
        values = read_all("(define x 1) (a . b) [c] #(\"s\" #\\space)")
        write_file(path, values)
        assert read_file(path) == values

    def test_write_file_to_directory_fails(self, tmp_path) -> None:
        with pytest.raises(IoError):
            write_file(str(tmp_path), [Integer(1)])


class TestWriting:
    """write and write_all."""

    def test_write(self) -> None:
        out = io.StringIO()
        write(ProperList((Integer(1),)), out)
        assert out.getvalue() == "(1)"

    def test_write_all_separates_values(self) -> None:
        out = io.StringIO()
        write_all([Symbol.of("a"), Symbol.of("b")], out)
        assert out.getvalue() == "a\n\nb\n"

    def test_write_all_empty(self) -> None:
        out = io.StringIO()
        write_all([], out)
        assert out.getvalue() == ""
