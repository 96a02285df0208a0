"""
Evaluator for address strings.

Walks the AST produced by the parser and computes one integer address.
Names resolve through explicitly supplied ResolutionTables and dereferences
go through a pluggable MemoryReader. Pure evaluation: no global state, and
the same text, tables and reader always give the same result or error.

Arithmetic stays in the integer domain. ``/`` and a negative ``**``
exponent truncate toward zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import assert_never

from addrstr.core.address_lang.memory import (
    ConstantMemoryReader,
    MemoryReader,
    MemoryReadError,
    format_address,
)
from addrstr.core.address_lang.parser import parse_address
from addrstr.core.errors import AddressRuntimeError, AddressStringError, Position
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
from addrstr.core.ir.tables import ResolutionTables

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Largest intermediate result of ``**``, in bits
MAX_POWER_BITS = 4096


@dataclass(frozen=True)
class _Context:
    tables: ResolutionTables
    reader: MemoryReader


def evaluate(
    expr: Expr,
    tables: ResolutionTables | None = None,
    reader: MemoryReader | None = None,
) -> int:
    """Evaluate a parsed address expression.

    Args:
        expr: Parsed expression AST.
        tables: Symbol, module and export lookup data. Defaults to empty tables.
        reader: Memory reader for ``[...]``. Defaults to ConstantMemoryReader.

    Returns:
        The computed address, never negative.

    Raises:
        AddressRuntimeError: On an unresolved name, division by zero, an
            unreadable dereference, or a negative final result.
    """
    ctx = _Context(
        tables=tables if tables is not None else ResolutionTables(),
        reader=reader if reader is not None else ConstantMemoryReader(),
    )
    try:
        value = _interpret(expr, ctx)
    except RecursionError:
        raise AddressRuntimeError(
            "expression is nested too deeply", expr.pos_start, expr.pos_end
        ) from None

    if value < 0:
        raise AddressRuntimeError(
            f"address must not be negative (got {format_address(value)})",
            expr.pos_start,
            expr.pos_end,
        )
    return value


def evaluate_address(
    source: str,
    tables: ResolutionTables | None = None,
    reader: MemoryReader | None = None,
) -> int:
    """Tokenize, parse and evaluate an address string.

    Usage:
        tables = ResolutionTables(symbols={"s1": 0x222})
        evaluate_address("s1*2+10", tables)   # 0x454

    Raises:
        AddressLexError, AddressSyntaxError, AddressRuntimeError: From the
            stage that rejected the input. Nothing is evaluated once a stage
            fails.
    """
    expr = parse_address(source)
    value = evaluate(expr, tables, reader)
    logger.debug("Evaluated %r to %s", source, format_address(value))
    return value


def try_evaluate_address(
    source: str,
    tables: ResolutionTables | None = None,
    reader: MemoryReader | None = None,
) -> int | AddressStringError:
    """Like evaluate_address(), but return the error instead of raising it."""
    try:
        return evaluate_address(source, tables, reader)
    except AddressStringError as e:
        logger.debug("Evaluation of %r failed: %s", source, e)
        return e


def _interpret(expr: Expr, ctx: _Context) -> int:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, HexLiteral):
        return int(expr.digits, 16)

    if isinstance(expr, IdentPath):
        return _interpret_ident_path(expr, ctx)

    if isinstance(expr, Unary):
        return _interpret_unary(expr, ctx)

    if isinstance(expr, Binary):
        return _interpret_binary(expr, ctx)

    if isinstance(expr, Dereference):
        return _interpret_dereference(expr, ctx)

    assert_never(expr)


def _interpret_ident_path(expr: IdentPath, ctx: _Context) -> int:
    """Resolve a name against the lookup tables."""
    tables = ctx.tables

    if expr.is_simple:
        name = expr.last
        if name in tables.symbols:
            return tables.symbols[name]
        if all(c in _HEX_DIGITS for c in name):
            return int(name, 16)
        export = tables.find_export(name)
        if export is not None:
            return export
        raise AddressRuntimeError(f"undefined symbol {name!r}", expr.pos_start, expr.pos_end)

    exports = tables.module_exports.get(expr.head)
    if exports is not None and expr.last in exports:
        return exports[expr.last]

    full_name = str(expr)
    if full_name in tables.module_bases:
        return tables.module_bases[full_name]

    raise AddressRuntimeError(f"not found {full_name!r}", expr.pos_start, expr.pos_end)


def _interpret_unary(expr: Unary, ctx: _Context) -> int:
    value = _interpret(expr.operand, ctx)
    if expr.op == UnaryOp.NEG:
        return -value
    return value


def _interpret_binary(expr: Binary, ctx: _Context) -> int:
    """Evaluate a binary expression, left operand first.

    Operator chains nest on the left, so the left spine is walked with a loop
    and folded left to right.
    """
    chain: list[Binary] = []
    node: Expr = expr
    while isinstance(node, Binary):
        chain.append(node)
        node = node.left

    value = _interpret(node, ctx)
    for link in reversed(chain):
        value = _apply_binary(link, value, _interpret(link.right, ctx))
    return value


def _apply_binary(expr: Binary, left: int, right: int) -> int:
    if expr.op is BinaryOp.ADD:
        return left + right
    if expr.op is BinaryOp.SUB:
        return left - right
    if expr.op is BinaryOp.MUL:
        return left * right
    if expr.op is BinaryOp.DIV:
        if right == 0:
            raise AddressRuntimeError("division by zero", expr.pos_start, expr.pos_end)
        return _divide(left, right)
    if expr.op is BinaryOp.POW:
        return _power(left, right, expr.pos_start, expr.pos_end)

    assert_never(expr.op)


def _divide(left: int, right: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _power(base: int, exponent: int, pos_start: Position, pos_end: Position) -> int:
    if exponent < 0:
        if base == 0:
            raise AddressRuntimeError("division by zero", pos_start, pos_end)
        # 1 / base**n truncates to 0 unless base is 1 or -1
        if abs(base) == 1:
            return base**-exponent
        return 0

    if (abs(base).bit_length() - 1) * exponent > MAX_POWER_BITS:
        raise AddressRuntimeError("result too large", pos_start, pos_end)
    return base**exponent


def _interpret_dereference(expr: Dereference, ctx: _Context) -> int:
    address = _interpret(expr.operand, ctx)
    try:
        value = ctx.reader.read_at(address)
    except MemoryReadError as e:
        raise AddressRuntimeError(str(e), expr.pos_start, expr.pos_end) from e
    logger.debug("Read %s from %s", format_address(value), format_address(address))
    return value
