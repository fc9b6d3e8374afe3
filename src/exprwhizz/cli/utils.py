"""
ExpressionWhizz CLI Utilities.

Shared utility functions used across CLI modules.
"""

import logging
import platform

import typer

from exprwhizz._version import get_version
from exprwhizz.config import WhizzSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"ExpressionWhizz {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(settings: WhizzSettings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=settings.logging_level, format=LOG_FORMAT)
    logging.getLogger("exprwhizz").setLevel(settings.logging_level)
