"""Tree serialization: structured dump, JSON text, and regenerated CSS."""

from __future__ import annotations

import json
from typing import Any

from cssnest.ast import AtRule, Block, Comment, Declaration, Node, Rule, Selector, Stylesheet
from cssnest.tokens import Position, Span

# ----------------------------------------------------------------------
# Structured dump
# ----------------------------------------------------------------------


def to_dict(node: Node, *, positions: bool = True, source: str | None = None) -> dict[str, Any]:
    """Convert *node* to nested dicts with a stable key order.

    Each dict starts with ``type``, then the node's own fields, then ``loc``
    (omitted when *positions* is false). ``source`` labels ``loc`` entries of
    a subtree dumped without its Stylesheet.
    """
    if isinstance(node, Stylesheet):
        source = node.source
    return _Dumper(positions, source if source is not None else "<input>").dump(node)


class _Dumper:
    def __init__(self, positions: bool, source: str) -> None:
        self._positions = positions
        self._source = source

    def dump(self, node: Node) -> dict[str, Any]:
        if isinstance(node, Stylesheet):
            out: dict[str, Any] = {
                "type": "Stylesheet",
                "source": node.source,
                "children": [self.dump(c) for c in node.children],
            }
        elif isinstance(node, Rule):
            out = {
                "type": "Rule",
                "selectors": [self.dump(s) for s in node.selectors],
                "block": self.dump(node.block),
            }
        elif isinstance(node, Selector):
            out = {"type": "Selector", "text": node.text}
        elif isinstance(node, Block):
            out = {"type": "Block", "children": [self.dump(c) for c in node.children]}
        elif isinstance(node, Declaration):
            out = {
                "type": "Declaration",
                "property": node.property,
                "value": node.value,
                "important": node.important,
            }
        elif isinstance(node, AtRule):
            out = {
                "type": "AtRule",
                "name": node.name,
                "prelude": node.prelude,
                "block": self.dump(node.block) if node.block is not None else None,
            }
        elif isinstance(node, Comment):
            out = {"type": "Comment", "value": node.value}
        else:
            raise TypeError(f"not a CSS node: {type(node).__name__}")

        if self._positions:
            out["loc"] = self._loc(node.span)
        return out

    def _loc(self, span: Span) -> dict[str, Any]:
        return {
            "source": self._source,
            "start": _position(span.start),
            "end": _position(span.end),
        }


def _position(pos: Position) -> dict[str, int]:
    return {"offset": pos.offset, "line": pos.line, "column": pos.column}


def from_dict(data: dict[str, Any]) -> Node:
    """Rebuild a tree from a :func:`to_dict` dump that includes positions."""
    kind = data.get("type")
    span = _span(data)

    if kind == "Stylesheet":
        children = tuple(from_dict(c) for c in data["children"])
        return Stylesheet(children, data["source"], span)
    if kind == "Rule":
        return Rule(
            tuple(from_dict(s) for s in data["selectors"]),
            from_dict(data["block"]),
            span,
        )
    if kind == "Selector":
        return Selector(data["text"], span)
    if kind == "Block":
        return Block(tuple(from_dict(c) for c in data["children"]), span)
    if kind == "Declaration":
        return Declaration(data["property"], data["value"], bool(data["important"]), span)
    if kind == "AtRule":
        block = data.get("block")
        return AtRule(
            data["name"],
            data["prelude"],
            from_dict(block) if block is not None else None,
            span,
        )
    if kind == "Comment":
        return Comment(data["value"], span)
    raise ValueError(f"unknown node type in dump: {kind!r}")


def _span(data: dict[str, Any]) -> Span:
    loc = data.get("loc")
    if not isinstance(loc, dict):
        raise ValueError(f"{data.get('type')} dump has no 'loc'; dump with positions=True")
    start = loc["start"]
    end = loc["end"]
    return Span(
        Position(start["line"], start["column"], start["offset"]),
        Position(end["line"], end["column"], end["offset"]),
    )


def to_json(node: Node, indent: int | None = 4, *, positions: bool = True) -> str:
    """Dump *node* as JSON text (the structured dump, serialized)."""
    return json.dumps(to_dict(node, positions=positions), indent=indent, ensure_ascii=False)


# ----------------------------------------------------------------------
# CSS text
# ----------------------------------------------------------------------


def to_css(node: Node, indent: str = "    ") -> str:
    """Regenerate CSS text from *node*, one item per line, nesting kept."""
    lines: list[str] = []
    _emit_css(node, 0, indent, lines)
    return "\n".join(lines) + ("\n" if lines else "")


def _emit_css(node: Node, depth: int, indent: str, lines: list[str]) -> None:
    pad = indent * depth
    if isinstance(node, Stylesheet):
        for child in node.children:
            _emit_css(child, depth, indent, lines)
    elif isinstance(node, Rule):
        head = ", ".join(s.text for s in node.selectors)
        _emit_block(f"{pad}{head}", node.block, depth, indent, lines)
    elif isinstance(node, AtRule):
        head = f"{pad}@{node.name}"
        if node.prelude:
            head += f" {node.prelude}"
        if node.block is None:
            lines.append(head + ";")
        else:
            _emit_block(head, node.block, depth, indent, lines)
    elif isinstance(node, Block):
        _emit_block(pad, node, depth, indent, lines)
    elif isinstance(node, Declaration):
        text = f"{pad}{node.property}:"
        if node.value:
            text += f" {node.value}"
        if node.important:
            text += " !important"
        lines.append(text + ";")
    elif isinstance(node, Comment):
        lines.append(f"{pad}/*{node.value}*/")
    elif isinstance(node, Selector):
        lines.append(f"{pad}{node.text}")
    else:
        raise TypeError(f"not a CSS node: {type(node).__name__}")


def _emit_block(head: str, block: Block, depth: int, indent: str, lines: list[str]) -> None:
    opener = f"{head} {{" if head.strip() else f"{head}{{"
    if not block.children:
        lines.append(opener + "}")
        return
    lines.append(opener)
    for child in block.children:
        _emit_css(child, depth + 1, indent, lines)
    lines.append(f"{indent * depth}}}")


def serialize(node: Node, mode: str = "json") -> str:
    """Serialize *node* as ``"json"`` (structured dump) or ``"css"`` text."""
    if mode == "json":
        return to_json(node)
    if mode == "css":
        return to_css(node)
    raise ValueError(f"unknown serialization mode {mode!r} (expected 'json' or 'css')")
