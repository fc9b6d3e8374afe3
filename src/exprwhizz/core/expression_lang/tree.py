"""
Structural helpers for expression trees: node count, depth, and the
fully parenthesized rendering used for display.
"""

from __future__ import annotations

from exprwhizz.core.ir.expressions import BinaryExpr, Expr, UnaryNegate, is_leaf, render

DEFAULT_CAPACITY = 1024
TRUNCATION_MARKER = "$"


def children(expr: Expr) -> tuple[Expr, ...]:
    """Direct children of a node, left to right."""
    if is_leaf(expr):
        return ()
    if isinstance(expr, BinaryExpr):
        return (expr.left, expr.right)
    if isinstance(expr, UnaryNegate):
        return (expr.operand,)
    return ()


def count(expr: Expr | None) -> int:
    """Number of nodes in the tree (0 for no tree)."""
    if expr is None:
        return 0

    total = 0
    pending = [expr]
    while pending:
        node = pending.pop()
        total += 1
        pending.extend(children(node))
    return total


def depth(expr: Expr | None) -> int:
    """Number of nodes on the longest root-to-leaf path (0 for no tree)."""
    if expr is None:
        return 0

    deepest = 0
    pending = [(expr, 1)]
    while pending:
        node, level = pending.pop()
        deepest = max(deepest, level)
        pending.extend((child, level + 1) for child in children(node))
    return deepest


def stringify(expr: Expr | None, capacity: int = DEFAULT_CAPACITY) -> str:
    """Render a tree as fully parenthesized infix text.

    ``capacity`` counts a terminating character, so at most
    ``capacity - 1`` characters are returned. Text that does not fit is
    cut short and ends with ``$``.

    Examples:
        6.5 * (4 + 3)  -> "(6.5 * (4 + 3))"
        -x             -> "(-x)"
    """
    if expr is None or capacity < 2:
        return ""

    text = render(expr, limit=capacity - 1)
    if len(text) < capacity:
        return text
    return text[: capacity - 2] + TRUNCATION_MARKER
