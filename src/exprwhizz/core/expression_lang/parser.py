"""
Recursive descent parser for the ExpressionWhizz expression language.

Grammar (binding strength increases downwards):
    assignment      → additive ("=" assignment)?
    additive        → multiplicative (("+" | "-") multiplicative)*
    multiplicative  → exponential (("*" | "/") exponential)*
    exponential     → primary ("^" exponential)?
    primary         → VALUE | SYMBOL | "(" assignment ")" | "-" primary

"+", "-", "*" and "/" fold to the left; "^" and "=" recurse to the right.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from exprwhizz.core.errors import ExpressionParseError
from exprwhizz.core.expression_lang.tokenizer import Token, TokenKind, TokenSequence, tokenize
from exprwhizz.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    Symbol,
    UnaryNegate,
    Value,
)

logger = logging.getLogger(__name__)

_ADDITIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_MULTIPLICATIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.MULTIPLY: BinaryOp.MUL,
    TokenKind.DIVIDE: BinaryOp.DIV,
}


class _Parser:
    """Recursive descent parser over a destructively consumed token stream."""

    def __init__(self, tokens: TokenSequence) -> None:
        self.tokens = tokens

    @property
    def current(self) -> Token:
        return self.tokens.peek()

    def advance(self) -> Token:
        return self.tokens.consume()

    def match(self, *kinds: TokenKind) -> Token | None:
        if self.current.kind in kinds:
            return self.advance()
        return None

    def unexpected(self) -> ExpressionParseError:
        tok = self.current
        return ExpressionParseError(f"Unexpected token {tok.kind}", tok.pos + 1)

    # -- Grammar rules --

    def parse_assignment(self) -> Expr:
        """additive ('=' assignment)?"""
        target = self.parse_additive()
        if self.match(TokenKind.EQUAL):
            value = self.parse_assignment()
            return BinaryExpr(op=BinaryOp.ASSIGN, left=target, right=value)
        return target

    def parse_additive(self) -> Expr:
        """multiplicative (('+' | '-') multiplicative)*"""
        left = self.parse_multiplicative()
        while self.current.kind in _ADDITIVE_OPS:
            op = _ADDITIVE_OPS[self.advance().kind]
            right = self.parse_multiplicative()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_multiplicative(self) -> Expr:
        """exponential (('*' | '/') exponential)*"""
        left = self.parse_exponential()
        while self.current.kind in _MULTIPLICATIVE_OPS:
            op = _MULTIPLICATIVE_OPS[self.advance().kind]
            right = self.parse_exponential()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_exponential(self) -> Expr:
        """primary ('^' exponential)?"""
        base = self.parse_primary()
        if self.match(TokenKind.POWER):
            exponent = self.parse_exponential()
            return BinaryExpr(op=BinaryOp.POWER, left=base, right=exponent)
        return base

    def parse_primary(self) -> Expr:
        """VALUE | SYMBOL | '(' assignment ')' | '-' primary"""
        tok = self.current

        if tok.kind == TokenKind.VALUE:
            self.advance()
            assert isinstance(tok.value, float)
            return Value(value=tok.value)

        if tok.kind == TokenKind.SYMBOL:
            self.advance()
            assert isinstance(tok.value, str)
            return Symbol(name=tok.value)

        # Parenthesized expression
        if tok.kind == TokenKind.OPEN_PAREN:
            self.advance()
            inner = self.parse_assignment()
            if not self.match(TokenKind.CLOSE_PAREN):
                raise ExpressionParseError("Expected ')'", self.current.pos + 1)
            return inner

        # Unary minus binds tighter than '^': -1^2 is (-1)^2
        if tok.kind == TokenKind.MINUS:
            self.advance()
            return UnaryNegate(operand=self.parse_primary())

        raise self.unexpected()


def parse(tokens: TokenSequence | Iterable[Token]) -> Expr | None:
    """Parse a token sequence into an expression tree.

    Tokens are consumed from the front of ``tokens``; after a successful
    parse the sequence is exhausted.

    Args:
        tokens: Output of :func:`tokenize`, or any iterable of tokens.

    Returns:
        The expression tree, or None when there is nothing to parse.

    Raises:
        ExpressionParseError: If the tokens do not form one expression.
    """
    if not isinstance(tokens, TokenSequence):
        tokens = TokenSequence(tokens)

    if tokens.next_kind() == TokenKind.END:
        return None

    parser = _Parser(tokens)
    try:
        expr = parser.parse_assignment()
    except RecursionError as e:
        raise ExpressionParseError("Expression too deeply nested") from e

    # Ensure all tokens consumed
    if tokens.next_kind() != TokenKind.END:
        tok = tokens.peek()
        raise ExpressionParseError(f"Syntax error on token {tok.kind}", tok.pos + 1)

    logger.debug("Parsed expression %s", expr)
    return expr


def parse_expr(source: str, *, increment_shorthand: bool = True) -> Expr | None:
    """Tokenize and parse an input line in one step.

    Raises:
        ExpressionTokenError: If tokenization fails.
        ExpressionParseError: If the expression is invalid.
    """
    return parse(tokenize(source, increment_shorthand=increment_shorthand))
