"""
addrstr CLI.

Commands:
- eval:   Evaluate one address string
- parse:  Show the parsed expression tree
- tokens: Show the token stream
- repl:   Read address strings from stdin, one per line

Tables come from a TOML file (``--tables`` or ``$ADDRSTR_TABLES``); without
one the built-in demo tables are used.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console

from addrstr._version import get_version
from addrstr.config import TABLES_ENV_VAR, AddrstrConfig, ConfigError, demo_tables, load_config
from addrstr.core.address_lang import evaluate_address, parse_address, tokenize
from addrstr.core.address_lang.memory import format_address
from addrstr.core.errors import AddressStringError

app = typer.Typer(
    help="Evaluate address strings such as game.exe+10 or [user32.MessageBoxA]",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

PROMPT = "addrstr> "

TablesOption = typer.Option(
    None,
    "--tables",
    "-t",
    envvar=TABLES_ENV_VAR,
    help="TOML file with [symbols], [modules], [exports.*] and [memory] tables",
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"addrstr {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def _load(tables: Path | None) -> AddrstrConfig:
    if tables is None:
        return AddrstrConfig(tables=demo_tables())
    try:
        return load_config(tables)
    except ConfigError as e:
        err_console.print(f"Error: {e}", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(1)


def _print_error(error: AddressStringError) -> None:
    err_console.print(error.format(), markup=False, highlight=False, soft_wrap=True)


@app.command(name="eval")
def eval_command(
    expression: str = typer.Argument(..., help="Address string to evaluate"),
    tables: Path | None = TablesOption,
) -> None:
    """Evaluate an address string and print the address in hex."""
    config = _load(tables)
    try:
        value = evaluate_address(expression, config.tables, config.memory_reader())
    except AddressStringError as e:
        _print_error(e)
        raise typer.Exit(1)
    console.print(format_address(value), highlight=False)


@app.command(name="parse")
def parse_command(
    expression: str = typer.Argument(..., help="Address string to parse"),
) -> None:
    """Print the fully parenthesised expression tree."""
    try:
        expr = parse_address(expression)
    except AddressStringError as e:
        _print_error(e)
        raise typer.Exit(1)
    console.print(str(expr), markup=False, highlight=False, soft_wrap=True)


@app.command(name="tokens")
def tokens_command(
    expression: str = typer.Argument(..., help="Address string to tokenize"),
) -> None:
    """Print one token per line."""
    try:
        tokens = tokenize(expression)
    except AddressStringError as e:
        _print_error(e)
        raise typer.Exit(1)
    for token in tokens:
        console.print(str(token), markup=False, highlight=False, soft_wrap=True)


@app.command(name="repl")
def repl_command(tables: Path | None = TablesOption) -> None:
    """Evaluate address strings read from stdin until end of input."""
    config = _load(tables)
    reader = config.memory_reader()

    while True:
        console.print(PROMPT, end="", markup=False, highlight=False)
        line = sys.stdin.readline()
        if not line:
            console.print()
            break
        text = line.strip()
        if not text:
            continue
        try:
            value = evaluate_address(text, config.tables, reader)
        except AddressStringError as e:
            _print_error(e)
            continue
        console.print(format_address(value), highlight=False)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
