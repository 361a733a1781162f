"""CSS tokenizer and parser with nesting support."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cssnest.ast import Node, Stylesheet
    from cssnest.config import ParseOptions
    from cssnest.tokens import Token

__version__ = "0.1.0"


def parse(
    text: str, options: ParseOptions | None = None, *, source: str | None = None
) -> Stylesheet:
    """Parse CSS text into a Stylesheet AST."""
    from cssnest.parser import parse as _parse

    return _parse(text, options, source=source)


def serialize(node: Node, mode: str = "json") -> str:
    """Serialize a tree as a JSON structured dump or as CSS text."""
    from cssnest.serialize import serialize as _serialize

    return _serialize(node, mode)


def tokenize(text: str, source: str = "<input>") -> list[Token]:
    """Tokenize CSS text, returning every token including the trailing EOF."""
    from cssnest.lexer import tokenize as _tokenize

    return _tokenize(text, source)
