"""
exactcalc CLI.

Commands:
- eval: evaluate an expression, binding variables with --var name=value
- vars: list an expression's variables in binding order
- tree: show how an expression was grouped
"""

from __future__ import annotations

import logging
import platform
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from exactcalc._version import get_version
from exactcalc.core.config import load_config
from exactcalc.core.errors import ArgumentError, ConfigError, ExpressionSyntaxError
from exactcalc.core.expression_lang import compile_expr, parse

app = typer.Typer(
    help="Evaluate exact decimal arithmetic expressions",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

EXIT_SYNTAX = 1
EXIT_ARGUMENTS = 2
EXIT_ARITHMETIC = 3


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"exactcalc {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """exactcalc command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_assignment(text: str) -> tuple[str, Decimal]:
    """Parse a ``name=value`` option into a binding."""
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise typer.BadParameter(f"Expected name=value, got {text!r}", param_hint="--var")
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        raise typer.BadParameter(f"Not a number: {value!r}", param_hint="--var") from None
    if not number.is_finite():
        raise typer.BadParameter(f"Not a finite number: {value!r}", param_hint="--var")
    return name, number


def _fail(message: str, code: int) -> typer.Exit:
    err_console.print(f"[red]{escape(message)}[/red]")
    return typer.Exit(code)


@app.command(name="eval")
def eval_command(
    expression: str = typer.Argument(..., help="Expression, e.g. '(a + b) * 2'"),
    var: list[str] | None = typer.Option(
        None,
        "--var",
        help="Variable binding as name=value (repeatable)",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML file with evaluator settings",
    ),
) -> None:
    """Evaluate an expression and print the result."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise _fail(str(e), EXIT_ARGUMENTS)

    bindings = dict(_parse_assignment(item) for item in var or [])

    try:
        fn = compile_expr(expression, config=config)
        result = fn(bindings)
    except ExpressionSyntaxError as e:
        raise _fail(f"Syntax error: {e}", EXIT_SYNTAX)
    except ArgumentError as e:
        raise _fail(str(e), EXIT_ARGUMENTS)
    except ArithmeticError as e:
        raise _fail(f"Arithmetic error: {type(e).__name__}", EXIT_ARITHMETIC)

    console.print(str(result), markup=False, highlight=False)


@app.command(name="vars")
def vars_command(
    expression: str = typer.Argument(..., help="Expression to inspect"),
) -> None:
    """List the variables an expression needs, in binding order."""
    try:
        compiled = parse(expression)
    except ExpressionSyntaxError as e:
        raise _fail(f"Syntax error: {e}", EXIT_SYNTAX)

    if not compiled.variables:
        console.print("No variables")
        return

    table = Table(title="Variables")
    table.add_column("Position", justify="right")
    table.add_column("Name")
    for index, name in enumerate(compiled.variables):
        table.add_row(str(index), escape(name))
    console.print(table)


@app.command(name="tree")
def tree_command(
    expression: str = typer.Argument(..., help="Expression to inspect"),
) -> None:
    """Print the expression fully parenthesized."""
    try:
        compiled = parse(expression)
    except ExpressionSyntaxError as e:
        raise _fail(f"Syntax error: {e}", EXIT_SYNTAX)

    console.print(str(compiled), markup=False, highlight=False)


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    app(argv)
