"""
Error types and source positions for address-string evaluation.

Every stage of the pipeline (tokenizer, parser, evaluator) reports failures
through the same hierarchy, and every error carries the span of source text
it refers to so a host can render a caret diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum


@dataclass(frozen=True)
class Position:
    """
    A location in the source text.

    Attributes:
        index: Character offset (0-indexed)
        row: Line number (0-indexed)
        column: Column number (0-indexed)
        text: The full source text the position points into
    """

    index: int
    row: int
    column: int
    text: str

    @classmethod
    def start(cls, text: str) -> Position:
        return cls(index=0, row=0, column=0, text=text)

    def advance(self, char: str | None = None) -> Position:
        """Return the position one character further on."""
        if char == "\n":
            return replace(self, index=self.index + 1, row=self.row + 1, column=0)
        return replace(self, index=self.index + 1, column=self.column + 1)

    def __str__(self) -> str:
        return f"{self.row + 1}:{self.column + 1}"


class ErrorKind(StrEnum):
    """Which stage rejected the input."""

    LEX = "LexError"
    SYNTAX = "SyntaxError"
    RUNTIME = "RuntimeError"


def render_arrows(text: str, pos_start: Position, pos_end: Position) -> str:
    """
    Reproduce the line at ``pos_start`` with a caret underline.

    Only the start line is shown. A span that runs onto later lines is
    underlined up to the end of the start line; a zero-width span still
    gets one caret.
    """
    lines = text.split("\n")
    line = lines[pos_start.row] if pos_start.row < len(lines) else ""

    if pos_end.row == pos_start.row:
        end_column = pos_end.column
    else:
        end_column = len(line)

    width = max(1, end_column - pos_start.column)
    return f"{line}\n{' ' * pos_start.column}{'^' * width}"


class AddressStringError(Exception):
    """Base exception for all address-string errors."""

    kind: ErrorKind = ErrorKind.RUNTIME

    def __init__(self, message: str, pos_start: Position, pos_end: Position | None = None):
        self.message = message
        self.pos_start = pos_start
        self.pos_end = pos_end if pos_end is not None else pos_start.advance()
        super().__init__(f"{self.kind}: {message}")

    @property
    def text(self) -> str:
        return self.pos_start.text

    def format(self) -> str:
        """
        Format the error as a multi-line diagnostic.

        Returns:
            Text like::

                SyntaxError: expected ')'
                  row 1, col 5

                (1+2
                    ^
        """
        return (
            f"{self.kind}: {self.message}\n"
            f"  row {self.pos_start.row + 1}, col {self.pos_start.column + 1}\n"
            "\n"
            f"{render_arrows(self.text, self.pos_start, self.pos_end)}"
        )


class AddressLexError(AddressStringError):
    """
    Raised when the input contains a character that cannot start a token.

    Examples:
    - Illegal characters such as ``@`` or ``#``
    - An unterminated quoted name
    - ``0x`` without any hex digits
    """

    kind = ErrorKind.LEX


class AddressSyntaxError(AddressStringError):
    """
    Raised when the token stream does not form an address expression.

    Examples:
    - Missing ``)`` or ``]``
    - A ``.`` not followed by a name
    - Trailing tokens after a complete expression
    """

    kind = ErrorKind.SYNTAX


class AddressRuntimeError(AddressStringError):
    """
    Raised when a well-formed expression cannot be evaluated.

    Examples:
    - Undefined symbol, module or export
    - Division by zero
    - A negative final address
    """

    kind = ErrorKind.RUNTIME
