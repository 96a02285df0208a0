"""
Memory readers used to resolve ``[address]`` dereferences.

The evaluator never touches process memory itself. A host supplies any object
with a ``read_at(address) -> int`` method; reading a real address space is
platform-specific and lives outside this package.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

# Value returned for every dereference when no real reader is plugged in
PLACEHOLDER_VALUE = 0xCE


class MemoryReadError(LookupError):
    """Raised by a reader when ``address`` cannot be read."""

    def __init__(self, address: int) -> None:
        super().__init__(f"cannot read memory at {format_address(address)}")
        self.address = address


@runtime_checkable
class MemoryReader(Protocol):
    """Reads the pointer-sized value stored at an address."""

    def read_at(self, address: int) -> int: ...


@dataclass(frozen=True)
class ConstantMemoryReader:
    """
    Placeholder reader: ignores the address and returns a fixed value.

    Stands in for real process-memory access so dereference expressions can
    be evaluated without attaching to a process.
    """

    value: int = PLACEHOLDER_VALUE

    def read_at(self, address: int) -> int:
        return self.value


@dataclass(frozen=True)
class MappingMemoryReader:
    """Reader backed by a fixed ``address → value`` mapping (memory snapshots, tests)."""

    memory: Mapping[int, int] = field(default_factory=dict)

    def read_at(self, address: int) -> int:
        try:
            return self.memory[address]
        except KeyError:
            raise MemoryReadError(address) from None


def format_address(address: int) -> str:
    if address < 0:
        return f"-0x{-address:X}"
    return f"0x{address:X}"
