"""
Expression types for exactcalc IR.

A parsed expression is a tree of three node kinds:

- Literal: a constant decimal value
- Variable: a zero-based slot in the positional argument vector
- BinaryExpr: one of + - * / applied to two sub-expressions

Variables are resolved by position, not by name. The names live once on the
CompiledExpression, in first-occurrence order, and that ordering is the
contract for binding values at execution time.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators, keyed by their source symbol."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A constant decimal value."""

    value: Decimal = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class Variable(BaseModel):
    """
    Reference to a variable by its position in the argument vector.

    Examples:
        - In ``a + b * a``: ``a`` → Variable(index=0), ``b`` → Variable(index=1)
    """

    index: int = Field(ge=0, description="Zero-based argument position")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"${self.index}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | Variable | BinaryExpr

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()


# ---------------------------------------------------------------------------
# Compiled expression
# ---------------------------------------------------------------------------


class CompiledExpression(BaseModel):
    """
    A parsed expression ready for execution.

    Holds no bound values: the same instance can be executed any number of
    times, from any number of threads, with different bindings.
    """

    source: str = Field(description="Expression text the tree was parsed from")
    root: Expr = Field(description="Root of the expression tree")
    variables: tuple[str, ...] = Field(
        default=(), description="Variable names in first-occurrence order"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def variable_count(self) -> int:
        return len(self.variables)

    def __str__(self) -> str:
        return render(self.root, self.variables)


def render(expr: Expr, names: tuple[str, ...] = ()) -> str:
    """Render a tree fully parenthesized, substituting variable names."""
    if isinstance(expr, Literal):
        return str(expr)
    if isinstance(expr, Variable):
        return names[expr.index] if expr.index < len(names) else str(expr)
    # Iterative so that very long operator chains render without recursion
    parts: list[str] = []
    stack: list[Expr | str] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, BinaryExpr):
            stack.extend([")", item.right, f" {item.op.value} ", item.left, "("])
        else:
            parts.append(render(item, names))
    return "".join(parts)
