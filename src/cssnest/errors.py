"""Error types with formatted source context."""

from __future__ import annotations

import re

from cssnest.tokens import Position, Span

# Line breaks exactly as the lexer counts them
_LINE_BREAK = re.compile(r"\r\n|[\n\r\f]")


def _render(message: str, source: str, label: str, start: Position, end: Position) -> str:
    lines = _LINE_BREAK.split(source)
    line_idx = start.line - 1
    col = start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx]
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if end.line == start.line:
        underline_len = max(1, end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {label}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class CssError(Exception):
    """Base class for all errors raised while reading CSS."""

    def __init__(self, message: str, source: str, label: str) -> None:
        self.message = message
        self.source = source
        self.label = label
        super().__init__(self.format())

    def format(self, label: str | None = None) -> str:
        raise NotImplementedError


class LexError(CssError):
    """Raised on the first lexing error, with position and source context."""

    def __init__(
        self, message: str, position: Position, source: str, label: str = "<input>"
    ) -> None:
        self.position = position
        super().__init__(message, source, label)

    def format(self, label: str | None = None) -> str:
        # Point at a single character
        end = Position(self.position.line, self.position.column + 1, self.position.offset + 1)
        return _render(self.message, self.source, label or self.label, self.position, end)


class ParseError(CssError):
    """Raised on the first parse error, with span and source context.

    ``expected`` and ``found`` hold the two halves of an "expected X, found Y"
    message when the error came from a token mismatch.
    """

    def __init__(
        self,
        message: str,
        span: Span,
        source: str,
        label: str = "<input>",
        expected: str | None = None,
        found: str | None = None,
    ) -> None:
        self.span = span
        self.expected = expected
        self.found = found
        super().__init__(message, source, label)

    def format(self, label: str | None = None) -> str:
        return _render(
            self.message, self.source, label or self.label, self.span.start, self.span.end
        )
