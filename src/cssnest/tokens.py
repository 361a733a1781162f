"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Trivia
    WS = auto()  # run of space, tab, newline, CR, form feed
    COMMENT = auto()  # /* ... */: value is the comment body

    # Names
    IDENT = auto()  # color, -webkit-box, --main-bg
    AT_KEYWORD = auto()  # @media: value excludes '@'
    HASH = auto()  # #fff, #main: value excludes '#'

    # Literals
    STRING = auto()  # "..." or '...': value is resolved contents
    URL = auto()  # url(unquoted): value is the URL
    NUMBER = auto()  # 1, -2.5, 1e3
    PERCENTAGE = auto()  # 50%
    DIMENSION = auto()  # 10px: unit in Token.unit

    # Punctuation
    DELIM = auto()  # any other single character: . > + ~ * & ! etc.
    COLON = auto()  # :
    SEMICOLON = auto()  # ;
    COMMA = auto()  # ,
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with resolved value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span
    unit: str = ""


# Single-character punctuation with a dedicated token type
PUNCTUATION: dict[str, TokenType] = {
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}

WHITESPACE = frozenset(" \t\n\r\f")


def is_whitespace(ch: str) -> bool:
    """Return True if ch is CSS whitespace."""
    return ch in WHITESPACE


def is_digit(ch: str) -> bool:
    return ch != "" and "0" <= ch <= "9"


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is a hexadecimal digit."""
    return ch != "" and ch in "0123456789abcdefABCDEF"


def is_name_start(ch: str) -> bool:
    """Return True if ch may start an identifier (letter, '_', or non-ASCII)."""
    if ch == "":
        return False
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_" or ord(ch) >= 0x80


def is_name_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return is_name_start(ch) or is_digit(ch) or ch == "-"


def is_valid_escape(first: str, second: str) -> bool:
    """Return True if the two characters start a valid CSS escape."""
    return first == "\\" and second != "" and second not in "\n\r\f"


def starts_identifier(first: str, second: str, third: str) -> bool:
    """Return True if the next three characters would start an identifier."""
    if first == "-":
        return is_name_start(second) or second == "-" or is_valid_escape(second, third)
    if is_name_start(first):
        return True
    return is_valid_escape(first, second)


def starts_number(first: str, second: str, third: str) -> bool:
    """Return True if the next three characters would start a number."""
    if first in ("+", "-"):
        if is_digit(second):
            return True
        return second == "." and is_digit(third)
    if first == ".":
        return is_digit(second)
    return is_digit(first)
