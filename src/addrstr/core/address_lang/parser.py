"""
Precedence-climbing parser for address strings.

Grammar:
    expr     → unary (infix_op expr)*          (precedence climbing)
    unary    → ("+" | "-") atom | atom
    atom     → HEX | path | "(" expr ")" | "[" expr "]"
    path     → IDENT ("." IDENT)*

Binding powers (higher binds tighter):
    unary + -   17
    **          16
    * /         15
    + -         14

Every binary operator, ``**`` included, is left-associative: ``2**3**2`` is
``(2**3)**2``. Unary signs apply to a single atom and do not nest.
"""

from __future__ import annotations

import logging

from addrstr.core.address_lang.tokenizer import Token, TokenKind, tokenize
from addrstr.core.errors import AddressSyntaxError
from addrstr.core.ir.expressions import (
    Binary,
    BinaryOp,
    Dereference,
    Expr,
    HexLiteral,
    IdentPath,
    Unary,
    UnaryOp,
)

logger = logging.getLogger(__name__)

PREFIX_POWER = 17

INFIX_POWER: dict[TokenKind, int] = {
    TokenKind.POW: 16,
    TokenKind.MUL: 15,
    TokenKind.DIV: 15,
    TokenKind.PLUS: 14,
    TokenKind.MINUS: 14,
}

_BINARY_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.POW: BinaryOp.POW,
    TokenKind.MUL: BinaryOp.MUL,
    TokenKind.DIV: BinaryOp.DIV,
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_UNARY_OPS: dict[TokenKind, UnaryOp] = {
    TokenKind.PLUS: UnaryOp.POS,
    TokenKind.MINUS: UnaryOp.NEG,
}

# Parenthesis/bracket nesting allowed before giving up
MAX_NESTING = 100


class _Parser:
    """Parser state for a single token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def expect(self, kind: TokenKind, message: str) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise AddressSyntaxError(message, tok.pos_start, tok.pos_end)
        return self.advance()

    # -- Grammar rules --

    def parse_binary(self, min_power: int = 0) -> Expr:
        """Parse operators binding tighter than ``min_power``."""
        tok = self.current
        left: Expr
        if tok.kind in _UNARY_OPS and PREFIX_POWER > min_power:
            self.advance()
            operand = self.parse_atom()
            left = Unary(
                op=_UNARY_OPS[tok.kind],
                operand=operand,
                pos_start=tok.pos_start,
                pos_end=operand.pos_end,
            )
        else:
            left = self.parse_atom()

        while True:
            power = INFIX_POWER.get(self.current.kind)
            if power is None or power <= min_power:
                break
            op_tok = self.advance()
            # An operator of equal power ends the recursive call, so chains fold left

            right = self.parse_binary(power)
            left = Binary(
                op=_BINARY_OPS[op_tok.kind],
                left=left,
                right=right,
                pos_start=left.pos_start,
                pos_end=right.pos_end,
            )

        return left

    def parse_atom(self) -> Expr:
        """HEX | path | '(' expr ')' | '[' expr ']'"""
        tok = self.current

        if tok.kind == TokenKind.HEX:
            self.advance()
            assert tok.value is not None
            return HexLiteral(text=tok.value, pos_start=tok.pos_start, pos_end=tok.pos_end)

        if tok.kind == TokenKind.IDENT:
            return self._parse_ident_path()

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self._parse_nested()
            self.expect(TokenKind.RPAREN, "expected ')'")
            return expr

        if tok.kind == TokenKind.LSQUARE:
            self.advance()
            expr = self._parse_nested()
            close = self.expect(TokenKind.RSQUARE, "expected ']'")
            return Dereference(operand=expr, pos_start=tok.pos_start, pos_end=close.pos_end)

        if tok.kind == TokenKind.EOF:
            raise AddressSyntaxError(
                "invalid token: unexpected end of input",
                tok.pos_start,
                tok.pos_end,
            )
        raise AddressSyntaxError(
            f"invalid token {tok.value!r}, expected a hex number, name, '(' or '['",
            tok.pos_start,
            tok.pos_end,
        )

    def _parse_nested(self) -> Expr:
        if self.depth >= MAX_NESTING:
            tok = self.current
            raise AddressSyntaxError("expression is nested too deeply", tok.pos_start, tok.pos_end)
        self.depth += 1
        try:
            return self.parse_binary()
        finally:
            self.depth -= 1

    def _parse_ident_path(self) -> IdentPath:
        """IDENT ('.' IDENT)*"""
        first = self.advance()
        assert first.value is not None
        segments = [first.value]
        last = first

        while self.current.kind == TokenKind.DOT:
            self.advance()
            last = self.expect(TokenKind.IDENT, "expected identifier")
            assert last.value is not None
            segments.append(last.value)

        return IdentPath(segments=segments, pos_start=first.pos_start, pos_end=last.pos_end)


def parse_tokens(tokens: list[Token]) -> Expr:
    """
    Parse a token list (ending in EOF) into an AST.

    Raises:
        AddressSyntaxError: If the tokens do not form exactly one expression.
    """
    parser = _Parser(tokens)
    expr = parser.parse_binary()

    # Ensure all tokens consumed
    if parser.current.kind != TokenKind.EOF:
        tok = parser.current
        raise AddressSyntaxError(
            f"unexpected trailing input {tok.value!r}",
            tok.pos_start,
            tok.pos_end,
        )

    logger.debug("Parsed %s", expr)
    return expr


def parse_address(source: str) -> Expr:
    """Parse an address string into an AST.

    Args:
        source: Address string (e.g., ``"user32.dll+[s1*2]"``)

    Returns:
        Parsed expression AST.

    Raises:
        AddressLexError: If tokenization fails.
        AddressSyntaxError: If the expression is invalid.
    """
    return parse_tokens(tokenize(source))
