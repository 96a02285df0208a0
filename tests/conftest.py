"""Shared pytest fixtures for addrstr tests."""

from pathlib import Path

import pytest

from addrstr.core.ir import ResolutionTables


@pytest.fixture
def tables() -> ResolutionTables:
    """Return tables with a couple of symbols, modules and exports."""
    return ResolutionTables(
        symbols={"s1": 0x222, "s2": 0x333},
        module_bases={"game.exe": 0x00400000, "user32.dll": 0x763B0000},
        module_exports={
            "user32": {"MessageBoxA": 0x1},
            "kernel32": {"GetProcAddress": 0x7C80AE30},
        },
    )


@pytest.fixture
def tables_file(tmp_path: Path) -> Path:
    """Return path to a TOML tables file."""
    path = tmp_path / "tables.toml"
    path.write_text(
        """\
[symbols]
s9 = 0x10
name = "0xff"

[modules]
"my game.exe" = 0x00400000

[exports.user32]
MessageBoxA = 0x1

[memory]
"0x400000" = 0x1000
"1004" = "42"
"""
    )
    return path
