"""
ExpressionWhizz CLI Package.

- calc.py: calculator commands (repl, eval, tokens)
- utils.py: version display and logging setup
"""

from __future__ import annotations

from pathlib import Path

import typer

from exprwhizz.cli.calc import eval_command, repl_command, tokens_command
from exprwhizz.cli.utils import configure_logging, version_callback
from exprwhizz.config import load_settings
from exprwhizz.core.errors import ConfigError

app = typer.Typer(
    help="""ExpressionWhizz – arithmetic calculator with variables

Operators: + - * / ^ ( ) and assignment with =
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Settings file (default: ./whizz.toml if present)",
    ),
) -> None:
    """ExpressionWhizz CLI main callback for global options."""
    try:
        settings = load_settings(config)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    configure_logging(settings)
    ctx.obj = settings


app.command(name="repl")(repl_command)
app.command(name="eval")(eval_command)
app.command(name="tokens")(tokens_command)


def main() -> None:
    """Entry point for the ``exprwhizz`` console script."""
    app()


__all__ = ["app", "main"]
