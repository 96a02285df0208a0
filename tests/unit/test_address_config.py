"""Tests for resolution tables and TOML table loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from addrstr.config import AddrstrConfig, ConfigError, demo_tables, load_config, parse_config
from addrstr.core.address_lang import evaluate_address
from addrstr.core.ir import ResolutionTables


class TestResolutionTables:
    def test_defaults_are_empty(self) -> None:
        tables = ResolutionTables()
        assert tables.symbols == {}
        assert tables.module_bases == {}
        assert tables.module_exports == {}

    def test_negative_address_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResolutionTables(symbols={"s1": -1})

    def test_negative_export_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResolutionTables(module_exports={"user32": {"MessageBoxA": -1}})

    def test_frozen(self, tables: ResolutionTables) -> None:
        with pytest.raises(ValidationError):
            tables.symbols = {}  # type: ignore[misc]

    def test_find_export(self, tables: ResolutionTables) -> None:
        assert tables.find_export("GetProcAddress") == 0x7C80AE30
        assert tables.find_export("Missing") is None

    def test_independent_tables(self) -> None:
        first = ResolutionTables(symbols={"base": 0x10})
        second = ResolutionTables(symbols={"base": 0x20})
        assert evaluate_address("base+1", first) == 0x11
        assert evaluate_address("base+1", second) == 0x21


class TestDemoTables:
    def test_demo_values(self) -> None:
        tables = demo_tables()
        assert evaluate_address("s1", tables) == 0x222
        assert evaluate_address("game.exe", tables) == 0x00400000
        assert evaluate_address("user32.dll", tables) == 0x763B0000
        assert evaluate_address("user32.MessageBoxA", tables) == 0x1

    def test_fresh_instance_each_call(self) -> None:
        assert demo_tables() is not demo_tables()


class TestLoadConfig:
    def test_load(self, tables_file: Path) -> None:
        config = load_config(tables_file)
        assert config.tables.symbols == {"s9": 0x10, "name": 0xFF}
        assert config.tables.module_bases == {"my game.exe": 0x00400000}
        assert config.tables.module_exports == {"user32": {"MessageBoxA": 0x1}}
        assert config.memory == {0x400000: 0x1000, 0x1004: 0x42}

    def test_memory_reader(self, tables_file: Path) -> None:
        config = load_config(tables_file)
        reader = config.memory_reader()
        assert reader is not None
        assert evaluate_address('[["my game.exe"]+4]', config.tables, reader) == 0x42

    def test_no_memory_section(self, tmp_path: Path) -> None:
        path = tmp_path / "tables.toml"
        path.write_text("[symbols]\na1 = 1\n")
        config = load_config(path)
        assert config.memory is None
        assert config.memory_reader() is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "tables.toml"
        path.write_text("[symbols\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    def test_negative_value(self, tmp_path: Path) -> None:
        path = tmp_path / "tables.toml"
        path.write_text("[symbols]\ns1 = -1\n")
        with pytest.raises(ConfigError, match="must not be negative"):
            load_config(path)

    def test_bad_hex_string(self, tmp_path: Path) -> None:
        path = tmp_path / "tables.toml"
        path.write_text('[modules]\n"game.exe" = "zz"\n')
        with pytest.raises(ConfigError, match="not a hex number"):
            load_config(path)

    def test_bool_value(self, tmp_path: Path) -> None:
        path = tmp_path / "tables.toml"
        path.write_text("[symbols]\ns1 = true\n")
        with pytest.raises(ConfigError, match="expected an address"):
            load_config(path)

    def test_export_section_must_be_table(self, tmp_path: Path) -> None:
        path = tmp_path / "tables.toml"
        path.write_text("[exports]\nuser32 = 5\n")
        with pytest.raises(ConfigError, match=r"\[exports.user32\] must be a table"):
            load_config(path)

    def test_section_must_be_table(self) -> None:
        with pytest.raises(ConfigError, match=r"\[symbols\] must be a table"):
            parse_config({"symbols": 5})


class TestParseConfig:
    def test_empty(self) -> None:
        config = parse_config({})
        assert config == AddrstrConfig()
        assert config.tables == ResolutionTables()

    def test_hex_strings(self) -> None:
        config = parse_config({"symbols": {"a": "0x10", "b": "ff"}})
        assert config.tables.symbols == {"a": 0x10, "b": 0xFF}

    @pytest.mark.parametrize("text", ["-10", " 10 ", "1_0", "0x", "", "+5"])
    def test_rejects_non_hex_text(self, text: str) -> None:
        with pytest.raises(ConfigError, match="not a hex number"):
            parse_config({"symbols": {"a": text}})

    def test_rejects_negative_memory_key(self) -> None:
        with pytest.raises(ConfigError, match=r"'-10' is not a hex number"):
            parse_config({"memory": {"-10": 1}})

    def test_uppercase_prefix(self) -> None:
        config = parse_config({"memory": {"0X1F": "0xAB"}})
        assert config.memory == {0x1F: 0xAB}
