"""
ExpressionWhizz - an arithmetic expression calculator with variables.

Tokenizes, parses and evaluates expressions such as ``x = 2 ^ 3 ^ 2``
against a session-wide variable dictionary.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.dictionary import Dictionary
from .core.errors import (
    ExpressionEvalError,
    ExpressionParseError,
    ExpressionTokenError,
    WhizzError,
)
from .core.expression_lang import count, depth, evaluate, parse, stringify, tokenize
from .core.session import Session

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "Dictionary",
    "Session",
    "WhizzError",
    "ExpressionTokenError",
    "ExpressionParseError",
    "ExpressionEvalError",
    "tokenize",
    "parse",
    "evaluate",
    "stringify",
    "count",
    "depth",
]
