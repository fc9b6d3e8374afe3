"""
Expression evaluator for the ExpressionWhizz expression language.

Evaluates expression trees against a variable Dictionary. Arithmetic
follows IEEE-754 double semantics: division by zero and overflow give
infinities or NaN instead of raising. Assignment is the only operation
with a side effect; it writes into the Dictionary passed in.
"""

from __future__ import annotations

import logging
import math

from exprwhizz.core.dictionary import Dictionary
from exprwhizz.core.errors import ExpressionEvalError
from exprwhizz.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    Symbol,
    UnaryNegate,
    Value,
)

logger = logging.getLogger(__name__)


def evaluate(expr: Expr, env: Dictionary) -> float:
    """Evaluate an expression tree against a variable environment.

    Args:
        expr: Parsed expression tree.
        env: Variables visible to the expression; assignments store into it.

    Returns:
        The computed value. NaN is a legitimate result (e.g. ``0 / 0``).

    Raises:
        ExpressionEvalError: On an undefined variable or an assignment
            whose left side is not a variable name.
    """
    values: list[float] = []
    # Postorder worklist of (node, children_done)
    pending: list[tuple[Expr, bool]] = [(expr, False)]

    while pending:
        node, children_done = pending.pop()

        if isinstance(node, Value):
            values.append(node.value)

        elif isinstance(node, Symbol):
            value = env.retrieve(node.name)
            if value is None:
                raise ExpressionEvalError(f"Undefined variable: {node.name}")
            values.append(value)

        elif isinstance(node, UnaryNegate):
            if children_done:
                values.append(-values.pop())
            else:
                pending.append((node, True))
                pending.append((node.operand, False))

        elif isinstance(node, BinaryExpr) and node.op == BinaryOp.ASSIGN:
            # Only the right side is evaluated; the left must name a variable
            if children_done:
                values.append(_assign(node, values.pop(), env))
            else:
                pending.append((node, True))
                pending.append((node.right, False))

        elif isinstance(node, BinaryExpr):
            if children_done:
                right = values.pop()
                left = values.pop()
                values.append(_apply(node.op, left, right))
            else:
                # Pushed last, so the left operand is evaluated first
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))

        else:
            raise ExpressionEvalError(f"Unknown expression type: {type(node).__name__}")

    return values.pop()


def _assign(expr: BinaryExpr, value: float, env: Dictionary) -> float:
    """Bind an already evaluated right side to the symbol on the left."""
    if not isinstance(expr.left, Symbol):
        raise ExpressionEvalError("Left side of assignment must be a symbol")
    env.store(expr.left.name, value)
    logger.debug("Assigned %s = %g", expr.left.name, value)
    return value


def _apply(op: BinaryOp, left: float, right: float) -> float:
    """Apply an arithmetic operator to two evaluated operands."""
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        return ieee_divide(left, right)
    if op == BinaryOp.POWER:
        return ieee_pow(left, right)

    raise ExpressionEvalError(f"Unknown binary op: {op}")


def ieee_divide(left: float, right: float) -> float:
    """Divide without raising: x/0 is a signed infinity, 0/0 is NaN."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        negative = (math.copysign(1.0, left) < 0) != (math.copysign(1.0, right) < 0)
        return -math.inf if negative else math.inf
    return left / right


def ieee_pow(base: float, exponent: float) -> float:
    """Raise ``base`` to ``exponent`` with C ``pow`` results instead of exceptions."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return _signed_infinity(base, exponent)
    except ValueError:
        # zero to a negative power; anything else is a domain error
        if base == 0.0:
            return _signed_infinity(base, exponent)
        return math.nan


def _signed_infinity(base: float, exponent: float) -> float:
    """Infinity carrying the sign pow would give: negative only for odd integer powers."""
    odd_integer = exponent.is_integer() and math.fmod(exponent, 2.0) != 0.0
    if odd_integer and math.copysign(1.0, base) < 0:
        return -math.inf
    return math.inf
