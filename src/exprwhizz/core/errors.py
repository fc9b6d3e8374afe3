"""
Error types for ExpressionWhizz tokenizing, parsing, and evaluation.
"""

from __future__ import annotations


class WhizzError(Exception):
    """Base exception for all ExpressionWhizz errors."""

    def __init__(self, message: str, position: int | None = None) -> None:
        self.message = message
        self.position = position
        super().__init__(message)


class ExpressionTokenError(WhizzError):
    """
    Raised when input text cannot be tokenized.

    Examples:
    - Unexpected character
    - Symbol longer than the maximum length

    ``position`` is the 1-based index of the offending character.
    """

    pass


class ExpressionParseError(WhizzError):
    """
    Raised when a token sequence does not form a valid expression.

    Examples:
    - Unexpected token
    - Unmatched parenthesis
    - Trailing tokens after a complete expression
    """

    pass


class ExpressionEvalError(WhizzError):
    """
    Raised when a well-formed expression cannot be evaluated.

    Examples:
    - Undefined variable
    - Assignment to something other than a variable name
    """

    pass


class ConfigError(WhizzError):
    """Raised when settings cannot be loaded or contain invalid values."""

    pass
