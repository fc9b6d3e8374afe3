"""Installed version of ExpressionWhizz."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "exprwhizz"


def get_version() -> str:
    """Version recorded in the installed distribution metadata."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0+unknown"
