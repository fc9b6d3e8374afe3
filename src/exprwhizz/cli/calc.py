"""
ExpressionWhizz calculator commands.

- repl:   interactive read-eval-print loop
- eval:   evaluate expressions given on the command line
- tokens: show how a line is tokenized
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from exprwhizz.config import WhizzSettings
from exprwhizz.core.errors import ExpressionTokenError
from exprwhizz.core.expression_lang.tokenizer import format_tokens, tokenize
from exprwhizz.core.session import LineKind, LineResult, Session

console = Console()
err_console = Console(stderr=True)

WELCOME = "Welcome to ExpressionWhizz!"


def _settings(ctx: typer.Context) -> WhizzSettings:
    settings = ctx.obj if isinstance(ctx.obj, WhizzSettings) else None
    return settings or WhizzSettings()


def _report(result: LineResult) -> None:
    """Print a line result: errors to stderr, everything else to stdout."""
    if result.kind == LineKind.ERROR:
        err_console.print(result.describe(), style="red", markup=False, highlight=False)
    elif result.kind not in (LineKind.EMPTY, LineKind.QUIT):
        console.print(result.describe(), markup=False, highlight=False)


def _print_variables(session: Session) -> None:
    variables = session.list_variables()
    if not variables:
        console.print("No variables defined", style="dim")
        return

    table = Table(title="Variables")
    table.add_column("Name", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in variables:
        table.add_row(name, f"{value:g}")
    console.print(table)


def _run_meta_command(session: Session, line: str) -> None:
    """Handle ':vars', ':del NAME' and ':dump'."""
    command, _, argument = line[1:].strip().partition(" ")
    argument = argument.strip()

    if command == "vars":
        _print_variables(session)
    elif command == "del":
        if not argument:
            err_console.print("Usage: :del NAME", style="red", markup=False)
            return
        try:
            session.delete(argument)
        except KeyError:
            err_console.print(
                f"Cannot delete '{argument}': no such variable", style="red", markup=False
            )
            return
        console.print(f"Variable '{argument}' deleted", markup=False)
    elif command == "dump":
        for entry in session.variables.dump():
            console.print(entry, markup=False, highlight=False)
    else:
        err_console.print(f"Unknown command ':{command}'", style="red", markup=False)


def repl_command(ctx: typer.Context) -> None:
    """Start the interactive calculator. Type 'quit' or send EOF to leave."""
    settings = _settings(ctx)
    session = Session(settings)

    console.print(WELCOME, style="bold")
    while True:
        console.print()
        try:
            line = console.input(settings.prompt)
        except (EOFError, KeyboardInterrupt):
            break

        if line.strip().startswith(":"):
            _run_meta_command(session, line.strip())
            continue

        result = session.run(line)
        if result.kind == LineKind.QUIT:
            break
        _report(result)


def eval_command(
    ctx: typer.Context,
    expressions: list[str] = typer.Argument(
        ...,
        help="Expressions to evaluate, in order, sharing one set of variables",
    ),
) -> None:
    """Evaluate one or more expressions and print the results."""
    session = Session(_settings(ctx))

    failed = False
    for line in expressions:
        result = session.run(line)
        _report(result)
        failed = failed or not result.ok

    if failed:
        raise typer.Exit(code=1)


def tokens_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Line to tokenize"),
) -> None:
    """Show the tokens an input line produces."""
    settings = _settings(ctx)
    try:
        tokens = tokenize(expression, increment_shorthand=settings.increment_shorthand)
    except ExpressionTokenError as e:
        err_console.print(str(e), style="red", markup=False)
        raise typer.Exit(code=1)

    for line in format_tokens(tokens):
        console.print(line, markup=False, highlight=False)
