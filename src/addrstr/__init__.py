"""
addrstr - address-string expressions for memory inspection.

Evaluates expressions like ``game.exe+10``, ``[user32.MessageBoxA]`` or
``s1*2`` against symbol, module and export tables.
"""

from __future__ import annotations

from ._version import get_version
from .core.address_lang import evaluate_address, try_evaluate_address
from .core.errors import (
    AddressLexError,
    AddressRuntimeError,
    AddressStringError,
    AddressSyntaxError,
    ErrorKind,
)
from .core.ir import ResolutionTables

__version__ = get_version()

__all__ = [
    "__version__",
    "AddressLexError",
    "AddressRuntimeError",
    "AddressStringError",
    "AddressSyntaxError",
    "ErrorKind",
    "ResolutionTables",
    "evaluate_address",
    "try_evaluate_address",
]
