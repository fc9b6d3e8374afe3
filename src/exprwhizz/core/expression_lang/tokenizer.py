"""
Tokenizer for the ExpressionWhizz expression language.

Converts an input line into a sequence of typed tokens.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

from exprwhizz.core.errors import ExpressionTokenError
from exprwhizz.core.ir.expressions import SYMBOL_MAX_LENGTH

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    VALUE = "VALUE"
    SYMBOL = "SYMBOL"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    MULTIPLY = "MULTIPLY"
    DIVIDE = "DIVIDE"
    POWER = "POWER"
    EQUAL = "EQUAL"

    # Punctuation
    OPEN_PAREN = "OPEN_PAREN"
    CLOSE_PAREN = "CLOSE_PAREN"

    # End of input
    END = "(end)"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token from the expression tokenizer.

    ``value`` is a float for VALUE tokens, the name for SYMBOL tokens and
    None otherwise. ``pos`` is the 0-based offset in the source line.
    """

    kind: TokenKind
    value: float | str | None = None
    pos: int = 0

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.kind}, pos={self.pos})"
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


END_TOKEN = Token(TokenKind.END)


class TokenSequence:
    """Tokens consumed strictly front to back.

    Consuming moves a cursor forward over an immutable list; there is no
    way back. Past the last real token every peek or consume yields END.
    """

    __slots__ = ("_tokens", "_pos")

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self._tokens = tuple(tokens)
        self._pos = 0

    def peek(self) -> Token:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return END_TOKEN

    def next_kind(self) -> TokenKind:
        return self.peek().kind

    def consume(self) -> Token:
        tok = self.peek()
        if self._pos < len(self._tokens):
            self._pos += 1
        return tok

    @property
    def tokens(self) -> tuple[Token, ...]:
        """Every token of the sequence, consumed or not."""
        return self._tokens

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._tokens)

    def __len__(self) -> int:
        """Number of tokens not yet consumed."""
        return len(self._tokens) - self._pos

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens[self._pos :])

    def __getitem__(self, index: int) -> Token:
        return self._tokens[self._pos :][index]

    def __repr__(self) -> str:
        return f"TokenSequence({list(self)!r})"


_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULTIPLY,
    "/": TokenKind.DIVIDE,
    "^": TokenKind.POWER,
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "=": TokenKind.EQUAL,
}

_ARITHMETIC_SIGNS = frozenset("+-*/^")
_WHITESPACE = frozenset(" \t\n\v\f\r")
_DIGITS = frozenset("0123456789")

# Hexadecimal float: 0x1.8p+3, 0x3p2, 0xff
_HEX_NUMBER_RE = re.compile(
    r"0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?"
)
# Decimal float: 42, 3.14, 5., .5, 1e10, 2.5E-3
_DECIMAL_NUMBER_RE = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
# Symbol: letter or underscore followed by letters, digits or underscores
_SYMBOL_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def tokenize(source: str, *, increment_shorthand: bool = True) -> TokenSequence:
    """Tokenize an input line into a token sequence.

    Args:
        source: The text to tokenize.
        increment_shorthand: Fold ``<number>++`` / ``<number>--`` followed
            by an arithmetic sign into the number plus or minus one.

    Returns:
        The tokens in source order. No END token is stored.

    Raises:
        ExpressionTokenError: On an unexpected character or an over-long
            symbol. The error position is 1-based.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c in _WHITESPACE:
            i += 1
            continue

        # Numbers
        if c in _DIGITS or (c == "." and i + 1 < n and source[i + 1] in _DIGITS):
            i, tok = _read_number(source, i)
            tokens.append(tok)
            continue

        # Increment / decrement shorthand on the preceding number
        if (
            increment_shorthand
            and c in "+-"
            and source[i + 1 : i + 2] == c
            and source[i + 2 : i + 3] in _ARITHMETIC_SIGNS
            and tokens
            and tokens[-1].kind == TokenKind.VALUE
        ):
            prev = tokens.pop()
            assert isinstance(prev.value, float)
            delta = 1.0 if c == "+" else -1.0
            tokens.append(Token(TokenKind.VALUE, prev.value + delta, prev.pos))
            i += 2
            continue

        # Single-character operators and punctuation
        if c in _SINGLE_CHAR_TOKENS:
            tokens.append(Token(_SINGLE_CHAR_TOKENS[c], None, i))
            i += 1
            continue

        # Symbols
        m = _SYMBOL_RE.match(source, i)
        if m:
            name = m.group(0)
            if len(name) > SYMBOL_MAX_LENGTH:
                position = i + SYMBOL_MAX_LENGTH + 1
                raise ExpressionTokenError(f"Position {position}: symbol too long", position)
            tokens.append(Token(TokenKind.SYMBOL, name, i))
            i = m.end()
            continue

        raise ExpressionTokenError(f"Position {i + 1}: unexpected character {c}", i + 1)

    logger.debug("Tokenized %r into %d tokens", source, len(tokens))
    return TokenSequence(tokens)


def _read_number(source: str, start: int) -> tuple[int, Token]:
    """Read a numeric literal the way strtod would."""
    m = _HEX_NUMBER_RE.match(source, start)
    if m:
        try:
            value = float.fromhex(m.group(0))
        except OverflowError:
            value = math.inf
    else:
        m = _DECIMAL_NUMBER_RE.match(source, start)
        assert m is not None
        value = float(m.group(0))
    return m.end(), Token(TokenKind.VALUE, value, start)


def format_tokens(tokens: Iterable[Token]) -> list[str]:
    """Describe tokens one per line: index, kind and payload."""
    lines: list[str] = []
    for index, tok in enumerate(tokens):
        if tok.kind == TokenKind.VALUE:
            lines.append(f"{index} {tok.kind} {tok.value:g}")
        elif tok.kind == TokenKind.SYMBOL:
            lines.append(f"{index} {tok.kind} {tok.value}")
        else:
            lines.append(f"{index} {tok.kind}")
    return lines
