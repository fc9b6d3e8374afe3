"""
ExpressionWhizz expression language.

Tokenizer, parser, evaluator, and tree helpers for arithmetic
expressions with variables.

Usage:
    from exprwhizz.core.dictionary import Dictionary
    from exprwhizz.core.expression_lang import evaluate, parse, stringify, tokenize

    env = Dictionary()
    tree = parse(tokenize("x = 2 ^ 3 ^ 2"))
    evaluate(tree, env)   # 512.0
    stringify(tree)       # "(x = (2 ^ (3 ^ 2)))"
"""

from exprwhizz.core.expression_lang.evaluator import evaluate
from exprwhizz.core.expression_lang.parser import parse, parse_expr
from exprwhizz.core.expression_lang.tokenizer import (
    Token,
    TokenKind,
    TokenSequence,
    format_tokens,
    tokenize,
)
from exprwhizz.core.expression_lang.tree import count, depth, stringify

__all__ = [
    "Token",
    "TokenKind",
    "TokenSequence",
    "count",
    "depth",
    "evaluate",
    "format_tokens",
    "parse",
    "parse_expr",
    "stringify",
    "tokenize",
]
