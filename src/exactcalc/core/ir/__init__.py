"""Intermediate representation for parsed expressions."""

from exactcalc.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    CompiledExpression,
    Expr,
    Literal,
    Variable,
    render,
)

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "CompiledExpression",
    "Expr",
    "Literal",
    "Variable",
    "render",
]
