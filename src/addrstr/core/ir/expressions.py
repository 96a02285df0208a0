"""
Expression AST for address strings.

Supports:
- Hex literals: 10, 0x400000, 7ffe
- Names: s1, user32.MessageBoxA, "my module.dll"
- Arithmetic: +, -, *, /, ** (all left-associative)
- Unary sign: -x, +x
- Dereference: [expr]

Every node keeps the span of source text it was parsed from. Spans are only
used for diagnostics and do not take part in evaluation.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from addrstr.core.errors import Position

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for address expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "**"


class UnaryOp(StrEnum):
    """Unary operators for address expressions."""

    POS = "+"
    NEG = "-"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class HexLiteral(BaseModel):
    """A numeric literal, always read as hexadecimal (``0x`` prefix optional)."""

    text: str = Field(description="Literal text as written, including any 0x prefix")
    pos_start: Position
    pos_end: Position

    model_config = ConfigDict(frozen=True)

    @property
    def digits(self) -> str:
        """The hex digits without a ``0x`` prefix."""
        if self.text[:2].lower() == "0x":
            return self.text[2:]
        return self.text

    def __str__(self) -> str:
        return self.text


class IdentPath(BaseModel):
    """
    A dotted name: a symbol, a bare export, a module export or a module file.

    Examples:
        - IdentPath(segments=["s1"]) → s1
        - IdentPath(segments=["user32", "MessageBoxA"]) → user32.MessageBoxA
        - IdentPath(segments=["game", "exe"]) → game.exe
    """

    segments: list[str] = Field(min_length=1, description="Name segments split on '.'")
    pos_start: Position
    pos_end: Position

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return ".".join(self.segments)

    @property
    def is_simple(self) -> bool:
        """Single segment, no dots."""
        return len(self.segments) == 1

    @property
    def head(self) -> str:
        """Every segment but the last, joined with dots."""
        return ".".join(self.segments[:-1])

    @property
    def last(self) -> str:
        return self.segments[-1]


class Unary(BaseModel):
    """Unary sign: op operand."""

    op: UnaryOp
    operand: Expr
    pos_start: Position
    pos_end: Position

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class Binary(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr
    pos_start: Position
    pos_end: Position

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        # Chains nest on the left; render the left spine with a loop
        chain: list[Binary] = []
        node: Expr = self
        while isinstance(node, Binary):
            chain.append(node)
            node = node.left
        text = str(node)
        for link in reversed(chain):
            text = f"({text} {link.op.value} {link.right})"
        return text


class Dereference(BaseModel):
    """Pointer dereference: the value stored at the address ``[operand]``."""

    operand: Expr
    pos_start: Position
    pos_end: Position

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.operand}]"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = HexLiteral | IdentPath | Unary | Binary | Dereference

# Rebuild models for recursive forward references
Unary.model_rebuild()
Binary.model_rebuild()
Dereference.model_rebuild()
