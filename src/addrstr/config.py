"""
Table configuration for addrstr.

Loads resolution tables (and an optional memory snapshot) from a TOML file:

    [symbols]
    s1 = 0x222

    [modules]
    "game.exe" = 0x00400000

    [exports.user32]
    MessageBoxA = 0x1

    [memory]
    "0x400000" = 0x1234

Values may be TOML integers or hex strings ("763b0000" or "0x763b0000").
Memory keys are always hex strings, since TOML keys are strings.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from addrstr.core.address_lang.memory import MappingMemoryReader
from addrstr.core.ir.tables import ResolutionTables

logger = logging.getLogger(__name__)

# Environment variable naming the default tables file for the CLI
TABLES_ENV_VAR = "ADDRSTR_TABLES"

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class ConfigError(Exception):
    """Raised when a tables file cannot be loaded."""


class AddrstrConfig(BaseModel):
    """Complete evaluation configuration."""

    tables: ResolutionTables = Field(default_factory=ResolutionTables)
    memory: dict[int, int] | None = None

    model_config = ConfigDict(frozen=True)

    def memory_reader(self) -> MappingMemoryReader | None:
        """Reader over the configured memory snapshot, if there is one."""
        if self.memory is None:
            return None
        return MappingMemoryReader(memory=dict(self.memory))


def demo_tables() -> ResolutionTables:
    """Sample tables for trying expressions out interactively."""
    return ResolutionTables(
        symbols={"s1": 0x222, "s2": 0x333},
        module_bases={"game.exe": 0x00400000, "user32.dll": 0x763B0000},
        module_exports={"user32": {"MessageBoxA": 0x1}},
    )


def load_config(toml_path: Path) -> AddrstrConfig:
    """
    Load tables from a TOML file.

    Args:
        toml_path: Path to the tables file

    Returns:
        AddrstrConfig with the parsed tables

    Raises:
        ConfigError: If the file is missing, not valid TOML, or holds
            values that are not non-negative integers
    """
    if not toml_path.exists():
        raise ConfigError(f"Tables file not found: {toml_path}")

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {toml_path}: {e}") from e

    config = parse_config(data, source=str(toml_path))
    logger.debug(
        "Loaded %d symbols, %d modules, %d export tables from %s",
        len(config.tables.symbols),
        len(config.tables.module_bases),
        len(config.tables.module_exports),
        toml_path,
    )
    return config


def parse_config(data: dict[str, Any], source: str = "<config>") -> AddrstrConfig:
    """Build an AddrstrConfig from already-parsed TOML data."""
    exports_data = _section(data, "exports", source)
    try:
        tables = ResolutionTables(
            symbols=_addresses(_section(data, "symbols", source), f"{source}: [symbols]"),
            module_bases=_addresses(_section(data, "modules", source), f"{source}: [modules]"),
            module_exports={
                module: _addresses(
                    _as_table(exports, f"{source}: [exports.{module}]"),
                    f"{source}: [exports.{module}]",
                )
                for module, exports in exports_data.items()
            },
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid tables in {source}: {e}") from e

    memory: dict[int, int] | None = None
    if "memory" in data:
        where = f"{source}: [memory]"
        memory = {
            _parse_hex(key, f"{where} key {key!r}"): value
            for key, value in _addresses(_section(data, "memory", source), where).items()
        }

    return AddrstrConfig(tables=tables, memory=memory)


def _section(data: dict[str, Any], name: str, source: str) -> dict[str, Any]:
    return _as_table(data.get(name, {}), f"{source}: [{name}]")


def _as_table(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be a table")
    return value


def _addresses(section: dict[str, Any], where: str) -> dict[str, int]:
    result: dict[str, int] = {}
    for key, value in section.items():
        if isinstance(value, bool):
            raise ConfigError(f"{where} {key!r}: expected an address, got {value!r}")
        if isinstance(value, int):
            address = value
        elif isinstance(value, str):
            address = _parse_hex(value, f"{where} {key!r}")
        else:
            raise ConfigError(f"{where} {key!r}: expected an address, got {value!r}")
        if address < 0:
            raise ConfigError(f"{where} {key!r}: address must not be negative")
        result[key] = address
    return result


def _parse_hex(text: str, where: str) -> int:
    digits = text[2:] if text[:2].lower() == "0x" else text
    if not digits or not all(c in _HEX_DIGITS for c in digits):
        raise ConfigError(f"{where}: {text!r} is not a hex number")
    return int(digits, 16)
