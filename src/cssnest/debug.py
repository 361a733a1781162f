"""Human-readable AST dump."""

from __future__ import annotations

import sys
from typing import TextIO

from cssnest.ast import AtRule, Block, Comment, Declaration, Node, Rule, Selector, Stylesheet


def dump_ast(node: Node, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    _dump(node, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump(node: Node, depth: int, f: TextIO) -> None:
    if isinstance(node, Stylesheet):
        f.write(f"{_indent(depth)}Stylesheet {node.source}\n")
        for child in node.children:
            _dump(child, depth + 1, f)
    elif isinstance(node, Rule):
        _dump_rule(node, depth, f)
    elif isinstance(node, AtRule):
        _dump_at_rule(node, depth, f)
    elif isinstance(node, Block):
        _dump_block(node, depth, f)
    elif isinstance(node, Declaration):
        bang = " !important" if node.important else ""
        f.write(f"{_indent(depth)}Declaration {node.property}: {node.value!r}{bang}\n")
    elif isinstance(node, Selector):
        f.write(f"{_indent(depth)}Selector({node.text!r})\n")
    elif isinstance(node, Comment):
        f.write(f"{_indent(depth)}Comment({node.value!r})\n")


def _dump_rule(node: Rule, depth: int, f: TextIO) -> None:
    line = node.span.start.line
    f.write(f"{_indent(depth)}Rule (line {line})\n")
    for selector in node.selectors:
        _dump(selector, depth + 1, f)
    _dump_block(node.block, depth + 1, f)


def _dump_at_rule(node: AtRule, depth: int, f: TextIO) -> None:
    prelude = f" {node.prelude}" if node.prelude else ""
    f.write(f"{_indent(depth)}AtRule @{node.name}{prelude}\n")
    if node.block is not None:
        _dump_block(node.block, depth + 1, f)


def _dump_block(block: Block, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}Block\n")
    for child in block.children:
        _dump(child, depth + 1, f)
