"""
Resolution tables for names in address strings.

The tables are read-only lookup data supplied by the host. They are passed
explicitly to the evaluator, so independently configured evaluations can run
side by side.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class ResolutionTables(BaseModel):
    """
    Symbol, module and export lookup data.

    Attributes:
        symbols: Symbol name → value (``s1`` → ``0x222``)
        module_bases: Module file name, extension included → base address
            (``user32.dll`` → ``0x763b0000``)
        module_exports: Module short name, extension excluded → export name →
            address (``user32`` → ``MessageBoxA`` → ``0x1``). Iteration order
            decides which module wins when a bare export name is ambiguous.
    """

    symbols: dict[str, NonNegativeInt] = Field(default_factory=dict)
    module_bases: dict[str, NonNegativeInt] = Field(default_factory=dict)
    module_exports: dict[str, dict[str, NonNegativeInt]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def find_export(self, name: str) -> int | None:
        """Return the first export called ``name`` across all modules."""
        for exports in self.module_exports.values():
            if name in exports:
                return exports[name]
        return None
