"""
Tokenizer for address strings.

Converts an address string into a sequence of typed tokens. Text between
double quotes is tokenized with a wider identifier alphabet, so module names
containing spaces, brackets or parentheses can be written verbatim:

    "my game.exe"+10      →  IDENT("my game") DOT IDENT("exe") PLUS HEX("10")
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum, auto

from addrstr.core.errors import AddressLexError, Position

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for address strings."""

    # Literals and names
    HEX = auto()
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    MUL = auto()
    DIV = auto()
    POW = auto()  # **

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LSQUARE = auto()
    RSQUARE = auto()
    DOT = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token with the span of source text it covers."""

    __slots__ = ("kind", "value", "pos_start", "pos_end")

    def __init__(
        self,
        kind: TokenKind,
        value: str | None,
        pos_start: Position,
        pos_end: Position,
    ) -> None:
        self.kind = kind
        self.value = value
        self.pos_start = pos_start
        self.pos_end = pos_end

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos_start.index})"

    def __str__(self) -> str:
        if self.value is None:
            return self.kind.upper()
        return f"{self.kind.upper()}:{self.value}"


# Word characters, CJK ideographs, hyphen, apostrophe, ampersand
_IDENT_CHAR_RE = re.compile(r"[\w\u4e00-\u9fa5\-'&]")
# Inside quotes: additionally parentheses, brackets, '=' and whitespace
_INSTRING_CHAR_RE = re.compile(r"[\w\u4e00-\u9fa5\-'&()\[\]=\s]")

_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_WHITESPACE = frozenset(" \t\r\n")

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "/": TokenKind.DIV,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LSQUARE,
    "]": TokenKind.RSQUARE,
    ".": TokenKind.DOT,
}


class _Cursor:
    """Read position over the source, owned by a single tokenize() call."""

    __slots__ = ("text", "pos", "char")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = Position.start(text)
        self.char: str | None = text[0] if text else None

    def advance(self) -> None:
        self.pos = self.pos.advance(self.char)
        self.char = self.text[self.pos.index] if self.pos.index < len(self.text) else None


def tokenize(source: str) -> list[Token]:
    """
    Tokenize an address string into a list of tokens.

    The list always ends with a single EOF token.

    Raises:
        AddressLexError: On a character that cannot start a token, an
            unterminated quoted name, or ``0x`` without digits.
    """
    cursor = _Cursor(source)
    tokens: list[Token] = []
    # Position of the opening quote while inside a quoted name
    quote_start: Position | None = None

    while cursor.char is not None:
        c = cursor.char
        in_string = quote_start is not None

        if c == '"':
            quote_start = None if in_string else cursor.pos
            cursor.advance()
            continue

        if not in_string and c in _WHITESPACE:
            cursor.advance()
            continue

        if in_string and _INSTRING_CHAR_RE.match(c):
            tokens.append(_read_ident(cursor, _INSTRING_CHAR_RE))
            continue

        if c == "*":
            tokens.append(_read_mul_or_pow(cursor))
            continue

        if c in _SINGLE_CHAR_TOKENS:
            start = cursor.pos
            cursor.advance()
            tokens.append(Token(_SINGLE_CHAR_TOKENS[c], c, start, cursor.pos))
            continue

        if c in _DIGITS:
            tokens.append(_read_hex(cursor))
            continue

        if _IDENT_CHAR_RE.match(c):
            tokens.append(_read_ident(cursor, _IDENT_CHAR_RE))
            continue

        start = cursor.pos
        cursor.advance()
        raise AddressLexError(f"illegal character {c!r}", start, cursor.pos)

    if quote_start is not None:
        raise AddressLexError("unterminated string", quote_start, cursor.pos)

    tokens.append(Token(TokenKind.EOF, None, cursor.pos, cursor.pos))
    logger.debug("Tokenized %r into %d tokens", source, len(tokens))
    return tokens


def _read_hex(cursor: _Cursor) -> Token:
    """Read a hex literal: a digit, an optional ``x`` after a leading ``0``, then hex digits."""
    start = cursor.pos
    first = cursor.char
    assert first is not None
    chars = [first]
    leading_zero = first == "0"
    cursor.advance()

    if leading_zero and cursor.char is not None and cursor.char in "xX":
        chars.append(cursor.char)
        cursor.advance()
        if cursor.char not in _HEX_DIGITS:
            raise AddressLexError("expected hex digits after '0x'", start, cursor.pos)

    while cursor.char is not None and cursor.char in _HEX_DIGITS:
        chars.append(cursor.char)
        cursor.advance()

    return Token(TokenKind.HEX, "".join(chars), start, cursor.pos)


def _read_ident(cursor: _Cursor, char_re: re.Pattern[str]) -> Token:
    """Read the longest run of characters matching ``char_re``."""
    start = cursor.pos
    chars: list[str] = []

    while cursor.char is not None and char_re.match(cursor.char):
        chars.append(cursor.char)
        cursor.advance()

    return Token(TokenKind.IDENT, "".join(chars), start, cursor.pos)


def _read_mul_or_pow(cursor: _Cursor) -> Token:
    start = cursor.pos
    cursor.advance()
    if cursor.char == "*":
        cursor.advance()
        return Token(TokenKind.POW, "**", start, cursor.pos)
    return Token(TokenKind.MUL, "*", start, cursor.pos)
