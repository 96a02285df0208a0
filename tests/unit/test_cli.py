"""Tests for the addrstr CLI commands."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from addrstr import __version__
from addrstr.cli import app

runner = CliRunner()


# ---------------------------------------------------------------------------
# addrstr eval
# ---------------------------------------------------------------------------


class TestEval:
    def test_demo_tables(self) -> None:
        result = runner.invoke(app, ["eval", "game.exe+10"])
        assert result.exit_code == 0
        assert "0x400010" in result.output

    def test_uppercase_hex(self) -> None:
        result = runner.invoke(app, ["eval", "user32.dll+abc"])
        assert result.exit_code == 0
        assert "0x763B0ABC" in result.output

    def test_dereference_placeholder(self) -> None:
        result = runner.invoke(app, ["eval", "[100]"])
        assert result.exit_code == 0
        assert "0xCE" in result.output

    def test_runtime_error(self) -> None:
        result = runner.invoke(app, ["eval", "1/0"])
        assert result.exit_code == 1
        assert "RuntimeError: division by zero" in result.output
        assert "row 1, col 1" in result.output

    def test_negative_result(self) -> None:
        result = runner.invoke(app, ["eval", "--", "-5"])
        assert result.exit_code == 1
        assert "address must not be negative" in result.output

    def test_syntax_error(self) -> None:
        result = runner.invoke(app, ["eval", "[s1"])
        assert result.exit_code == 1
        assert "SyntaxError: expected ']'" in result.output

    def test_long_chain(self) -> None:
        result = runner.invoke(app, ["eval", "+".join(["1"] * 1000)])
        assert result.exit_code == 0
        assert "0x3E8" in result.output

    def test_tables_file(self, tables_file: Path) -> None:
        result = runner.invoke(app, ["eval", "s9+name", "--tables", str(tables_file)])
        assert result.exit_code == 0
        assert "0x10F" in result.output

    def test_tables_file_replaces_demo_tables(self, tables_file: Path) -> None:
        result = runner.invoke(app, ["eval", "s1", "--tables", str(tables_file)])
        assert result.exit_code == 1
        assert "undefined symbol 's1'" in result.output

    def test_tables_file_memory(self, tables_file: Path) -> None:
        result = runner.invoke(app, ["eval", '["my game.exe"]', "-t", str(tables_file)])
        assert result.exit_code == 0
        assert "0x1000" in result.output

    def test_tables_from_environment(self, tables_file: Path) -> None:
        result = runner.invoke(app, ["eval", "s9"], env={"ADDRSTR_TABLES": str(tables_file)})
        assert result.exit_code == 0
        assert "0x10" in result.output

    def test_missing_tables_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["eval", "1", "--tables", str(tmp_path / "nope.toml")])
        assert result.exit_code == 1
        assert "not found" in result.output


# ---------------------------------------------------------------------------
# addrstr parse / tokens
# ---------------------------------------------------------------------------


class TestParse:
    def test_tree(self) -> None:
        result = runner.invoke(app, ["parse", "1+2*[s1]"])
        assert result.exit_code == 0
        assert "(1 + (2 * [s1]))" in result.output

    def test_error(self) -> None:
        result = runner.invoke(app, ["parse", "1 2"])
        assert result.exit_code == 1
        assert "unexpected trailing input" in result.output


class TestTokens:
    def test_tokens(self) -> None:
        result = runner.invoke(app, ["tokens", "s1+1"])
        assert result.exit_code == 0
        assert result.output.split() == ["IDENT:s1", "PLUS:+", "HEX:1", "EOF"]

    def test_error(self) -> None:
        result = runner.invoke(app, ["tokens", "1 @"])
        assert result.exit_code == 1
        assert "LexError: illegal character '@'" in result.output


# ---------------------------------------------------------------------------
# addrstr repl
# ---------------------------------------------------------------------------


class TestRepl:
    def test_continues_after_errors(self) -> None:
        result = runner.invoke(app, ["repl"], input="s1\n1/0\n\n[10]\n")
        assert result.exit_code == 0
        assert "0x222" in result.output
        assert "division by zero" in result.output
        assert "0xCE" in result.output
        assert result.output.count("addrstr> ") == 5

    def test_empty_input(self) -> None:
        result = runner.invoke(app, ["repl"], input="")
        assert result.exit_code == 0
        assert "addrstr> " in result.output


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("addrstr ")

    def test_version_matches_package(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.output.strip() == f"addrstr {__version__}"
        assert __version__ == "0.1.0"
