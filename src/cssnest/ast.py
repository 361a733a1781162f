"""AST node types for parsed CSS stylesheets."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from cssnest.tokens import Span


@dataclass(frozen=True, slots=True)
class Comment:
    """A /* ... */ comment between rules or declarations."""

    value: str
    span: Span


@dataclass(frozen=True, slots=True)
class Selector:
    """One complex selector from a comma-separated list, text kept verbatim."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Declaration:
    """property: value [!important]"""

    property: str
    value: str
    important: bool
    span: Span


@dataclass(frozen=True, slots=True)
class Block:
    """Contents of a {...} block: declarations mixed with nested rules."""

    children: tuple[Declaration | Rule | AtRule | Comment, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class Rule:
    """Qualified rule: selector list followed by a block."""

    selectors: tuple[Selector, ...]
    block: Block
    span: Span


@dataclass(frozen=True, slots=True)
class AtRule:
    """@name prelude; or @name prelude { ... }"""

    name: str
    prelude: str
    block: Block | None
    span: Span


@dataclass(frozen=True, slots=True)
class Stylesheet:
    """Root node."""

    children: tuple[Rule | AtRule | Comment, ...]
    source: str
    span: Span


Node = Stylesheet | Rule | Selector | Block | Declaration | AtRule | Comment


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of *node* in source order."""
    if isinstance(node, (Stylesheet, Block)):
        yield from node.children
    elif isinstance(node, Rule):
        yield from node.selectors
        yield node.block
    elif isinstance(node, AtRule):
        if node.block is not None:
            yield node.block
    elif isinstance(node, (Selector, Declaration, Comment)):
        return
    else:
        raise TypeError(f"not a CSS node: {type(node).__name__}")


def walk(node: Node) -> Iterator[Node]:
    """Depth-first pre-order traversal starting at (and including) *node*."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))
