"""Tests for the line tokenizer (core/tokenizer.py)."""

from __future__ import annotations

import pytest

from cmdshell.core.tokenizer import tokenize


class TestTokenize:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("a b", ["a", "b"]),
            ('"a b" c', ["a b", "c"]),
            ("", []),
            ("  ", []),
            ('"abc', ["abc"]),
            ("greet   world", ["greet", "world"]),
            ("\tlist\t-a ", ["list", "-a"]),
            ('say "hello there" now', ["say", "hello there", "now"]),
            ('pre"fix mid"post', ["prefix midpost"]),
        ],
    )
    def test_examples(self, line: str, expected: list[str]) -> None:
        assert tokenize(line) == expected

    def test_empty_quotes_produce_no_token(self) -> None:
        assert tokenize('a "" b') == ["a", "b"]

    def test_returns_new_list_each_call(self) -> None:
        first = tokenize("x")
        first.append("y")
        assert tokenize("x") == ["x"]
