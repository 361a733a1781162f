"""CSS lexer — converts source text into a lazy token stream."""

from __future__ import annotations

from collections.abc import Iterator

from cssnest.errors import LexError
from cssnest.tokens import (
    PUNCTUATION,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_hex_digit,
    is_name_char,
    is_valid_escape,
    is_whitespace,
    starts_identifier,
    starts_number,
)

_REPLACEMENT = "\ufffd"


class Lexer:
    """Tokenize CSS source text into a stream of Token objects.

    Every token's ``raw`` is the exact source slice it covers, so joining the
    raw text of all tokens gives back the input.
    """

    def __init__(self, source: str, label: str = "<input>") -> None:
        self._source = source
        self._label = label
        self._pos = 0
        self._line = 1
        self._col = 1
        self._custom_depth: int | None = None

    def tokens(self) -> Iterator[Token]:
        """Yield tokens one at a time, ending with EOF."""
        self._pos = 0
        self._line = 1
        self._col = 1
        self._custom_depth = None
        pending = False
        while self._pos < len(self._source):
            tok = self._next_token()
            pending = self._track_custom_value(tok, pending)
            yield tok
        pos = self._current_pos()
        yield Token(TokenType.EOF, "", "", Span(pos, pos))

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        return list(self.tokens())

    def _track_custom_value(self, tok: Token, pending: bool) -> bool:
        """Follow `--name: value` so its contents skip the number literal check.

        Returns whether a custom property name is waiting for its ':'.
        """
        tt = tok.type
        if self._custom_depth is None:
            if tt == TokenType.IDENT and tok.value.startswith("--"):
                return True
            if pending and tt == TokenType.COLON:
                self._custom_depth = 0
                return False
            return pending and tt in (TokenType.WS, TokenType.COMMENT)

        if tt in (TokenType.LBRACE, TokenType.LPAREN, TokenType.LBRACKET):
            self._custom_depth += 1
        elif tt in (TokenType.RBRACE, TokenType.RPAREN, TokenType.RBRACKET):
            if self._custom_depth > 0:
                self._custom_depth -= 1
            elif tt == TokenType.RBRACE:
                self._custom_depth = None
        elif tt == TokenType.SEMICOLON and self._custom_depth == 0:
            self._custom_depth = None
        return False

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        # \r\n counts once, on the \n
        if ch == "\n" or ch == "\f" or (ch == "\r" and self._peek() != "\n"):
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _make(self, tt: TokenType, value: str, start: Position, unit: str = "") -> Token:
        end = self._current_pos()
        raw = self._source[start.offset : end.offset]
        return Token(tt, value, raw, Span(start, end), unit)

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source, self._label)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _next_token(self) -> Token:
        ch = self._peek()
        start = self._current_pos()

        if ch == "\0":
            raise self._error("NUL character in source")

        if is_whitespace(ch):
            while is_whitespace(self._peek()):
                self._advance()
            return self._make(TokenType.WS, self._source[start.offset : self._pos], start)

        if ch == "/" and self._peek(1) == "*":
            return self._lex_comment()

        if ch in ("'", '"'):
            return self._lex_string()

        if ch == "#":
            if is_name_char(self._peek(1)) or is_valid_escape(self._peek(1), self._peek(2)):
                self._advance()
                name = self._consume_name()
                return self._make(TokenType.HASH, name, start)
            self._advance()
            return self._make(TokenType.DELIM, ch, start)

        if ch == "@":
            if starts_identifier(self._peek(1), self._peek(2), self._peek(3)):
                self._advance()
                name = self._consume_name()
                return self._make(TokenType.AT_KEYWORD, name, start)
            self._advance()
            return self._make(TokenType.DELIM, ch, start)

        if starts_number(ch, self._peek(1), self._peek(2)):
            return self._lex_numeric()

        if starts_identifier(ch, self._peek(1), self._peek(2)):
            return self._lex_ident_like()

        self._advance()
        if ch in PUNCTUATION:
            return self._make(PUNCTUATION[ch], ch, start)
        return self._make(TokenType.DELIM, ch, start)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _lex_comment(self) -> Token:
        start = self._current_pos()
        close = self._source.find("*/", self._pos + 2)
        if close == -1:
            raise self._error("unterminated comment", start)
        while self._pos < close + 2:
            self._advance()
        return self._make(TokenType.COMMENT, self._source[start.offset + 2 : close], start)

    # ------------------------------------------------------------------
    # Names and escapes
    # ------------------------------------------------------------------

    def _consume_escape(self) -> str:
        """Consume an escape (backslash already consumed), return the resolved char."""
        if is_hex_digit(self._peek()):
            digits = []
            while len(digits) < 6 and is_hex_digit(self._peek()):
                digits.append(self._advance())
            # One whitespace character after a hex escape belongs to it
            if self._peek() == "\r" and self._peek(1) == "\n":
                self._advance()
                self._advance()
            elif is_whitespace(self._peek()):
                self._advance()
            codepoint = int("".join(digits), 16)
            if codepoint == 0 or 0xD800 <= codepoint <= 0xDFFF or codepoint > 0x10FFFF:
                return _REPLACEMENT
            return chr(codepoint)
        if self._at_end():
            return _REPLACEMENT
        ch = self._advance()
        return _REPLACEMENT if ch == "\0" else ch

    def _consume_name(self) -> str:
        chars = []
        while not self._at_end():
            ch = self._peek()
            if is_name_char(ch):
                chars.append(self._advance())
            elif is_valid_escape(ch, self._peek(1)):
                self._advance()  # consume backslash
                chars.append(self._consume_escape())
            else:
                break
        return "".join(chars)

    def _lex_ident_like(self) -> Token:
        start = self._current_pos()
        name = self._consume_name()

        if name.lower() == "url" and self._peek() == "(":
            # url("x") stays IDENT + LPAREN + STRING; only unquoted urls are one token
            offset = 1
            while is_whitespace(self._peek(offset)):
                offset += 1
            if self._peek(offset) not in ("'", '"'):
                return self._lex_url(start)

        return self._make(TokenType.IDENT, name, start)

    def _lex_url(self, start: Position) -> Token:
        self._advance()  # consume (
        while is_whitespace(self._peek()):
            self._advance()

        chars = []
        while True:
            if self._at_end():
                raise self._error("unterminated url", start)
            ch = self._peek()
            if ch == ")":
                self._advance()
                return self._make(TokenType.URL, "".join(chars), start)
            if is_whitespace(ch):
                while is_whitespace(self._peek()):
                    self._advance()
                if self._at_end():
                    raise self._error("unterminated url", start)
                if self._peek() != ")":
                    raise self._error("invalid whitespace in url", start)
                continue
            if ch in "\"'(" or _is_non_printable(ch):
                raise self._error(f"invalid character {ch!r} in url", self._current_pos())
            if ch == "\\":
                if not is_valid_escape(ch, self._peek(1)):
                    raise self._error("invalid escape in url", self._current_pos())
                self._advance()
                chars.append(self._consume_escape())
                continue
            chars.append(self._advance())

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _lex_numeric(self) -> Token:
        start = self._current_pos()
        if self._peek() in ("+", "-"):
            self._advance()
        while is_digit(self._peek()):
            self._advance()
        if self._peek() == "." and is_digit(self._peek(1)):
            self._advance()
            while is_digit(self._peek()):
                self._advance()
        if self._peek() in ("e", "E"):
            sign = self._peek(1) in ("+", "-")
            if is_digit(self._peek(1)) or (sign and is_digit(self._peek(2))):
                self._advance()
                if sign:
                    self._advance()
                while is_digit(self._peek()):
                    self._advance()

        number = self._source[start.offset : self._pos]

        # Custom property values may hold any token sequence
        if self._custom_depth is None and self._peek() == "." and is_digit(self._peek(1)):
            raise self._error(f"invalid number literal '{number}.{self._peek(1)}'", start)

        if starts_identifier(self._peek(), self._peek(1), self._peek(2)):
            unit = self._consume_name()
            return self._make(TokenType.DIMENSION, number, start, unit)

        if self._peek() == "%":
            self._advance()
            return self._make(TokenType.PERCENTAGE, number, start, "%")

        return self._make(TokenType.NUMBER, number, start)

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _lex_string(self) -> Token:
        start = self._current_pos()
        quote = self._advance()
        chars = []

        while True:
            if self._at_end():
                raise self._error("unterminated string", start)
            ch = self._peek()
            if ch == quote:
                self._advance()
                return self._make(TokenType.STRING, "".join(chars), start)
            if ch in ("\n", "\r", "\f"):
                raise self._error("unterminated string", start)
            if ch == "\\":
                self._advance()
                nxt = self._peek()
                if nxt == "":
                    raise self._error("unterminated string", start)
                if nxt in ("\n", "\f"):
                    self._advance()  # line continuation
                elif nxt == "\r":
                    self._advance()
                    if self._peek() == "\n":
                        self._advance()
                else:
                    chars.append(self._consume_escape())
                continue
            chars.append(self._advance())


def _is_non_printable(ch: str) -> bool:
    o = ord(ch)
    return o <= 0x08 or o == 0x0B or 0x0E <= o <= 0x1F or o == 0x7F


class TokenStream:
    """Lazy, restartable token sequence: each iteration lexes from the start."""

    def __init__(self, source: str, label: str = "<input>") -> None:
        self.source = source
        self.label = label

    def __iter__(self) -> Iterator[Token]:
        return Lexer(self.source, self.label).tokens()


def tokenize(source: str, label: str = "<input>") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, label).tokenize()
