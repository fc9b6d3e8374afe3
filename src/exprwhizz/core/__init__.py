"""Core ExpressionWhizz functionality: IR, expression language, variable dictionary, session."""

from . import ir
from .dictionary import Dictionary
from .errors import (
    ConfigError,
    ExpressionEvalError,
    ExpressionParseError,
    ExpressionTokenError,
    WhizzError,
)
from .session import LineKind, LineResult, Session

__all__ = [
    "ir",
    "Dictionary",
    "WhizzError",
    "ExpressionTokenError",
    "ExpressionParseError",
    "ExpressionEvalError",
    "ConfigError",
    "Session",
    "LineKind",
    "LineResult",
]
