"""
Address-string language.

Tokenizer, parser and evaluator for expressions such as ``game.exe+10``,
``[user32.MessageBoxA]`` or ``s1*2``.

Usage:
    from addrstr.core.address_lang import evaluate_address
    from addrstr.core.ir import ResolutionTables

    tables = ResolutionTables(module_bases={"game.exe": 0x400000})
    evaluate_address("game.exe+10", tables)
    # == 0x400010
"""

from addrstr.core.address_lang.evaluator import evaluate, evaluate_address, try_evaluate_address
from addrstr.core.address_lang.memory import (
    ConstantMemoryReader,
    MappingMemoryReader,
    MemoryReader,
    MemoryReadError,
)
from addrstr.core.address_lang.parser import parse_address, parse_tokens
from addrstr.core.address_lang.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "ConstantMemoryReader",
    "MappingMemoryReader",
    "MemoryReadError",
    "MemoryReader",
    "Token",
    "TokenKind",
    "evaluate",
    "evaluate_address",
    "parse_address",
    "parse_tokens",
    "tokenize",
    "try_evaluate_address",
]
