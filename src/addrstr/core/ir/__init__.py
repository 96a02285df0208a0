"""
Address-string intermediate representation.

AST node types produced by the parser and the lookup tables consumed by the
evaluator.
"""

from .expressions import (
    Binary,
    BinaryOp,
    Dereference,
    Expr,
    HexLiteral,
    IdentPath,
    Unary,
    UnaryOp,
)
from .tables import ResolutionTables

__all__ = [
    "Binary",
    "BinaryOp",
    "Dereference",
    "Expr",
    "HexLiteral",
    "IdentPath",
    "ResolutionTables",
    "Unary",
    "UnaryOp",
]
