"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from cssnest.ast import Block, Declaration, Rule, Stylesheet
from cssnest.lexer import tokenize
from cssnest.parser import parse
from cssnest.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Stylesheet."""

    def _parse(source: str, label: str = "test.css") -> Stylesheet:
        return parse(source, source=label)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def significant(tokens: list[Token]) -> list[Token]:
    """Drop whitespace tokens."""
    return [t for t in tokens if t.type != TokenType.WS]


def assert_rule(node: object, *selectors: str) -> Rule:
    """Assert that node is a Rule with exactly the given selector texts."""
    assert isinstance(node, Rule), f"Expected Rule, got {type(node).__name__}"
    actual = [s.text for s in node.selectors]
    assert actual == list(selectors), f"Expected selectors {list(selectors)}, got {actual}"
    return node


def declarations(block: Block) -> list[Declaration]:
    """Return the declarations of a block, in order."""
    return [c for c in block.children if isinstance(c, Declaration)]
