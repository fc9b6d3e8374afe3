"""
ExpressionWhizz Intermediate Representation (IR) types.

All expression tree node types are re-exported from this package.
"""

from .expressions import (
    SYMBOL_MAX_LENGTH,
    BinaryExpr,
    BinaryOp,
    Expr,
    Symbol,
    UnaryNegate,
    Value,
    is_leaf,
    render,
)

__all__ = [
    "SYMBOL_MAX_LENGTH",
    "BinaryExpr",
    "BinaryOp",
    "Expr",
    "Symbol",
    "UnaryNegate",
    "Value",
    "is_leaf",
    "render",
]
