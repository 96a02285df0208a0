"""Core address-string functionality: IR, tokenizer, parser, evaluator and errors."""

from . import ir
from .errors import (
    AddressLexError,
    AddressRuntimeError,
    AddressStringError,
    AddressSyntaxError,
    ErrorKind,
    Position,
    render_arrows,
)

__all__ = [
    "ir",
    "AddressLexError",
    "AddressRuntimeError",
    "AddressStringError",
    "AddressSyntaxError",
    "ErrorKind",
    "Position",
    "render_arrows",
]
