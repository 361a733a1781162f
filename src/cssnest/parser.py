"""CSS parser — converts a token stream into an AST."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import replace

from cssnest.ast import AtRule, Block, Comment, Declaration, Rule, Selector, Stylesheet
from cssnest.config import ParseOptions
from cssnest.errors import ParseError
from cssnest.lexer import TokenStream
from cssnest.tokens import Position, Span, Token, TokenType

logger = logging.getLogger(__name__)


class Parser:
    """Recursive descent parser for CSS token streams.

    Tokens are pulled lazily from the iterable; only the lookahead needed to
    tell a nested rule from a declaration is buffered.
    """

    def __init__(self, tokens: Iterable[Token], source: str, options: ParseOptions) -> None:
        self._tokens = iter(tokens)
        self._buffer: deque[Token] = deque()
        self._exhausted = False
        self._source = source
        self._options = options
        self._depth = 0
        self._last: Token | None = None

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _fill(self, count: int) -> None:
        while len(self._buffer) < count and not self._exhausted:
            tok = next(self._tokens, None)
            if tok is None:
                self._exhausted = True
                self._append_missing_eof()
                break
            self._buffer.append(tok)
            if tok.type == TokenType.EOF:
                self._exhausted = True

    def _append_missing_eof(self) -> None:
        if self._buffer and self._buffer[-1].type == TokenType.EOF:
            return
        if self._buffer:
            pos = self._buffer[-1].span.end
        elif self._last is not None:
            pos = self._last.span.end
        else:
            pos = Position(1, 1, 0)
        self._buffer.append(Token(TokenType.EOF, "", "", Span(pos, pos)))

    def _peek(self, offset: int = 0) -> Token:
        self._fill(offset + 1)
        if offset < len(self._buffer):
            return self._buffer[offset]
        return self._buffer[-1]  # EOF

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _advance(self) -> Token:
        tok = self._peek()
        if tok.type != TokenType.EOF:
            self._buffer.popleft()
            self._last = tok
        return tok

    def _expect(self, tt: TokenType, what: str) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._expected(what, tok)
        return self._advance()

    def _skip_ws(self) -> None:
        while self._at(TokenType.WS):
            self._advance()

    def _skip_trivia(self) -> None:
        while self._at(TokenType.WS, TokenType.COMMENT):
            self._advance()

    # ------------------------------------------------------------------
    # Stylesheet level
    # ------------------------------------------------------------------

    def parse(self) -> Stylesheet:
        children: list[Rule | AtRule | Comment] = []
        start = self._peek().span.start

        while True:
            self._skip_ws()
            tok = self._peek()
            if tok.type == TokenType.EOF:
                break
            if tok.type == TokenType.COMMENT:
                self._advance()
                children.append(Comment(tok.value, tok.span))
            elif tok.type == TokenType.AT_KEYWORD:
                children.append(self._parse_at_rule())
            elif tok.type == TokenType.RBRACE:
                raise self._expected("rule", tok)
            else:
                children.append(self._parse_rule())

        end = self._peek().span.end
        return Stylesheet(tuple(children), self._options.source, Span(start, end))

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _parse_rule(self) -> Rule:
        start = self._peek().span.start
        prelude: list[Token] = []
        depth = 0

        while True:
            tok = self._peek()
            if tok.type == TokenType.EOF:
                break
            if depth == 0 and tok.type in _RULE_PRELUDE_STOP:
                break
            depth = _nest(depth, tok)
            prelude.append(self._advance())

        tok = self._peek()
        if tok.type != TokenType.LBRACE:
            raise self._expected("'{' after selector", tok)

        selectors = self._split_selectors(prelude, tok)
        block = self._parse_block()
        return Rule(selectors, block, Span(start, block.span.end))

    def _split_selectors(self, prelude: list[Token], terminator: Token) -> tuple[Selector, ...]:
        """Split a rule prelude on top-level commas into verbatim selectors."""
        selectors: list[Selector] = []
        group: list[Token] = []
        depth = 0

        for tok in prelude:
            if depth == 0 and tok.type == TokenType.COMMA:
                selectors.append(self._make_selector(group, tok))
                group = []
                continue
            depth = _nest(depth, tok)
            group.append(tok)

        selectors.append(self._make_selector(group, terminator))
        return tuple(selectors)

    def _make_selector(self, group: list[Token], terminator: Token) -> Selector:
        trimmed = _trim(group)
        if not trimmed:
            raise self._expected("selector", terminator)
        text = "".join(t.raw for t in trimmed)
        return Selector(text, Span(trimmed[0].span.start, trimmed[-1].span.end))

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _parse_block(self) -> Block:
        open_tok = self._expect(TokenType.LBRACE, "'{'")
        self._depth += 1
        if self._depth > self._options.max_depth:
            raise self._error(
                f"nesting too deep (limit is {self._options.max_depth} levels)", open_tok.span
            )

        children: list[Declaration | Rule | AtRule | Comment] = []
        while True:
            self._skip_ws()
            tok = self._peek()
            if tok.type == TokenType.RBRACE:
                break
            if tok.type == TokenType.EOF:
                raise self._expected("'}'", tok)
            if tok.type == TokenType.SEMICOLON:
                self._advance()
            elif tok.type == TokenType.COMMENT:
                self._advance()
                children.append(Comment(tok.value, tok.span))
            elif tok.type == TokenType.AT_KEYWORD:
                children.append(self._parse_at_rule())
            elif self._at_nested_rule():
                children.append(self._parse_rule())
            else:
                children.append(self._parse_declaration())

        close_tok = self._advance()
        self._depth -= 1
        return Block(tuple(children), Span(open_tok.span.start, close_tok.span.end))

    def _at_nested_rule(self) -> bool:
        """Decide whether the item starting here is a nested rule.

        A custom property followed by ':' is always a declaration. Otherwise a
        '{' at bracket depth zero before the next ';' or '}' means a rule.
        Items shaped like ``name:`` are scanned to the end; anything else gives
        up after ``lookahead_limit`` tokens.
        """
        first = self._peek()
        limit: int | None = self._options.lookahead_limit
        if first.type == TokenType.IDENT:
            offset = 1
            while self._peek(offset).type in _TRIVIA:
                offset += 1
            if self._peek(offset).type == TokenType.COLON:
                if first.value.startswith("--"):
                    return False
                limit = None

        depth = 0
        offset = 0
        while limit is None or offset < limit:
            tok = self._peek(offset)
            if tok.type == TokenType.EOF:
                return False
            if depth == 0:
                if tok.type == TokenType.LBRACE:
                    return True
                if tok.type in (TokenType.SEMICOLON, TokenType.RBRACE):
                    return False
            depth = _nest(depth, tok)
            offset += 1

        raise self._error(
            f"cannot tell declaration from nested rule within {limit} tokens", first.span
        )

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _parse_declaration(self) -> Declaration:
        name_tok = self._expect(TokenType.IDENT, "property name")
        self._skip_trivia()
        colon_tok = self._expect(TokenType.COLON, "':' after property name")

        # Custom property values may hold balanced {} blocks
        custom = name_tok.value.startswith("--")
        values: list[Token] = []
        depth = 0

        while True:
            tok = self._peek()
            if tok.type == TokenType.EOF:
                raise self._expected("'}'", tok)
            if depth == 0 and tok.type in (TokenType.SEMICOLON, TokenType.RBRACE):
                break
            depth = _nest(depth, tok, braces=custom)
            values.append(self._advance())

        values = _trim(values)
        end = values[-1].span.end if values else colon_tok.span.end
        important = False
        bang = _important_index(values)
        if bang is not None:
            important = True
            values = _trim(values[:bang])

        if self._at(TokenType.SEMICOLON):
            self._advance()

        value = "".join(t.raw for t in values)
        return Declaration(name_tok.value, value, important, Span(name_tok.span.start, end))

    # ------------------------------------------------------------------
    # At-rules
    # ------------------------------------------------------------------

    def _parse_at_rule(self) -> AtRule:
        at_tok = self._expect(TokenType.AT_KEYWORD, "at-rule")
        prelude: list[Token] = []
        depth = 0

        while True:
            tok = self._peek()
            if tok.type == TokenType.EOF:
                break
            if depth == 0 and tok.type in _RULE_PRELUDE_STOP:
                break
            depth = _nest(depth, tok)
            prelude.append(self._advance())

        prelude = _trim(prelude)
        text = "".join(t.raw for t in prelude)
        end = prelude[-1].span.end if prelude else at_tok.span.end

        block: Block | None = None
        if self._at(TokenType.LBRACE):
            block = self._parse_block()
            end = block.span.end
        elif self._at(TokenType.SEMICOLON):
            self._advance()

        return AtRule(at_tok.value, text, block, Span(at_tok.span.start, end))

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _error(self, message: str, span: Span | None = None) -> ParseError:
        if span is None:
            span = self._peek().span
        return ParseError(message, span, self._source, self._options.source)

    def _expected(self, what: str, tok: Token) -> ParseError:
        found = describe(tok)
        return ParseError(
            f"expected {what}, found {found}",
            tok.span,
            self._source,
            self._options.source,
            expected=what,
            found=found,
        )


# Module-level constants
_RULE_PRELUDE_STOP: frozenset[TokenType] = frozenset(
    {TokenType.LBRACE, TokenType.SEMICOLON, TokenType.RBRACE}
)
_OPENERS: frozenset[TokenType] = frozenset({TokenType.LPAREN, TokenType.LBRACKET})
_CLOSERS: frozenset[TokenType] = frozenset({TokenType.RPAREN, TokenType.RBRACKET})
_TRIVIA: frozenset[TokenType] = frozenset({TokenType.WS, TokenType.COMMENT})


def _nest(depth: int, tok: Token, braces: bool = False) -> int:
    """Return the bracket depth after *tok*."""
    if tok.type in _OPENERS or (braces and tok.type == TokenType.LBRACE):
        return depth + 1
    if tok.type in _CLOSERS or (braces and tok.type == TokenType.RBRACE):
        return max(0, depth - 1)
    return depth


def _trim(tokens: list[Token]) -> list[Token]:
    """Strip leading and trailing whitespace/comment tokens."""
    start = 0
    end = len(tokens)
    while start < end and tokens[start].type in _TRIVIA:
        start += 1
    while end > start and tokens[end - 1].type in _TRIVIA:
        end -= 1
    return tokens[start:end]


def _important_index(values: list[Token]) -> int | None:
    """Index of the '!' of a trailing '!important', or None."""
    if not values:
        return None
    last = values[-1]
    if last.type != TokenType.IDENT or last.value.lower() != "important":
        return None
    idx = len(values) - 2
    while idx >= 0 and values[idx].type in _TRIVIA:
        idx -= 1
    if idx >= 0 and values[idx].type == TokenType.DELIM and values[idx].value == "!":
        return idx
    return None


def describe(tok: Token) -> str:
    """Human-readable description of a token for error messages."""
    if tok.type == TokenType.EOF:
        return "end of input"
    if tok.type == TokenType.WS:
        return "whitespace"
    if tok.type == TokenType.COMMENT:
        return "comment"
    if tok.type == TokenType.STRING:
        return f"string {tok.raw}"
    return f"'{tok.raw}'"


def parse(
    text: str, options: ParseOptions | None = None, *, source: str | None = None
) -> Stylesheet:
    """Parse CSS text and return a Stylesheet AST.

    ``source`` overrides ``options.source`` as the label used in
    diagnostics and position metadata.
    """
    if options is None:
        options = ParseOptions()
    if source is not None:
        options = replace(options, source=source)
    sheet = Parser(TokenStream(text, options.source), text, options).parse()
    logger.debug("parsed %s: %d top-level nodes", options.source, len(sheet.children))
    return sheet
