"""
Expression tree types for the ExpressionWhizz IR.

Supports:
- Number literals: 3, 2.5, 1e10, 0x3p+2
- Variable names: x, rate_2
- Arithmetic: +, -, *, /, ^ (power)
- Unary minus
- Assignment: x = 25, a = b = y

Every node is an immutable pydantic model; a node owns its children and
trees are acyclic because only the parser builds them. Rendering with
``str()`` gives the fully parenthesized infix form.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

SYMBOL_MAX_LENGTH = 31

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POWER = "^"
    ASSIGN = "="


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Value(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


class Symbol(BaseModel):
    """A variable name, resolved against the environment at evaluation."""

    name: str = Field(max_length=SYMBOL_MAX_LENGTH, description="Variable name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


class UnaryNegate(BaseModel):
    """Unary minus: -operand."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


class BinaryExpr(BaseModel):
    """
    Binary operation: left op right.

    ASSIGN nodes are built like any other binary node; the requirement
    that the left side is a Symbol is enforced by the evaluator.
    """

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Value | Symbol | UnaryNegate | BinaryExpr

# Rebuild models for recursive forward references
UnaryNegate.model_rebuild()
BinaryExpr.model_rebuild()


def is_leaf(expr: Expr) -> bool:
    """True for nodes without children."""
    return isinstance(expr, (Value, Symbol))


def render(expr: Expr, limit: int | None = None) -> str:
    """Render a tree as fully parenthesized infix text.

    Walks the tree with an explicit stack of pending pieces, so trees of
    any depth render. With ``limit``, rendering stops as soon as the text
    grows longer than ``limit`` characters; the result is then a prefix of
    the full rendering that is one or more characters over the limit.
    """
    parts: list[str] = []
    length = 0
    pending: list[Expr | str] = [expr]

    while pending:
        item = pending.pop()
        if isinstance(item, str):
            piece = item
        elif isinstance(item, Value):
            piece = format(item.value, "g")
        elif isinstance(item, Symbol):
            piece = item.name
        elif isinstance(item, UnaryNegate):
            pending.extend((")", item.operand, "(-"))
            continue
        else:
            pending.extend((")", item.right, f" {item.op.value} ", item.left, "("))
            continue

        parts.append(piece)
        length += len(piece)
        if limit is not None and length > limit:
            break

    return "".join(parts)
