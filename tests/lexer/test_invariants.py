"""Property-based tests for tokenizer invariants.

Uses Hypothesis to check properties that must hold for any input:
- Token positions never move backwards
- With whitespace and comments retained, tokens tile the input exactly
- The token stream does not depend on how the input is chunked
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from sexpstream.config import ReadConfig
from sexpstream.errors import TokenizeError
from sexpstream.lexer import Tokenizer
from sexpstream.location import START
from sexpstream.tokens import NEED_INPUT, Token, TokenType

ALPHABET = "ab1#\\|\"'`,@;()[]{}:. \n\txλ€𝄞"

RETAIN_ALL = ReadConfig(retain_whitespace=True, retain_comments=True)


def outcome(tokenizer: Tokenizer, chunks: list[bytes] | None = None) -> tuple:
    """Tokens, or the kind and span of the first error."""
    tokens: list[Token] = []
    try:
        if chunks is not None:
            for chunk in chunks:
                tokenizer.feed(chunk)
                while (token := tokenizer.next_token()) is not NEED_INPUT:
                    tokens.append(token)
            tokenizer.finish()
        tokens.extend(tokenizer.tokenize())
    except TokenizeError as e:
        return ("error", e.kind, e.span)
    return ("ok", tokens)


class TestTokenizerInvariants:
    """Properties that hold for every input."""

    @given(st.text(alphabet=ALPHABET, max_size=80))
    @settings(max_examples=300)
    def test_never_crashes_unexpectedly(self, source: str) -> None:
        """Any input either tokenizes or raises TokenizeError."""
        result = outcome(Tokenizer(source))
        if result[0] == "ok":
            assert result[1][-1].type is TokenType.EOF

    @given(st.text(alphabet=ALPHABET, max_size=80))
    @settings(max_examples=300)
    def test_positions_are_monotonic(self, source: str) -> None:
        """Each token starts at or after the end of the previous one."""
        result = outcome(Tokenizer(source))
        if result[0] != "ok":
            return
        tokens = result[1]
        for prev, token in zip(tokens, tokens[1:], strict=False):
            assert token.start >= prev.end
            assert token.start.offset >= prev.end.offset
        for token in tokens:
            assert token.start <= token.end

    @given(st.text(alphabet=ALPHABET, max_size=80))
    @settings(max_examples=300)
    def test_retained_tokens_tile_the_input(self, source: str) -> None:
        """With all trivia retained every character belongs to one token."""
        result = outcome(Tokenizer(source, config=RETAIN_ALL))
        if result[0] != "ok":
            return
        tokens = result[1]
        assert tokens[0].start == START
        for prev, token in zip(tokens, tokens[1:], strict=False):
            assert token.start == prev.end
        assert tokens[-1].end == START.advance_text(source)
        assert tokens[-1].end.offset == len(source.encode())

    @given(
        st.text(alphabet=ALPHABET, max_size=60),
        st.lists(st.integers(min_value=0, max_value=240), max_size=8),
    )
    @settings(max_examples=300)
    def test_chunking_is_transparent(self, source: str, cuts: list[int]) -> None:
        """Same tokens, or the same error, however the bytes are split."""
        data = source.encode()
        points = sorted({min(c, len(data)) for c in cuts})
        chunks = [data[a:b] for a, b in zip([0, *points], [*points, len(data)], strict=True)]
        whole = outcome(Tokenizer(data, config=RETAIN_ALL))
        pushed = outcome(Tokenizer(config=RETAIN_ALL), chunks)
        assert pushed == whole
