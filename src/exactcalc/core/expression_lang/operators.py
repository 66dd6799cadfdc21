"""
Operator table for the expression language.

Four binary operators, closed set. Higher precedence binds tighter; all
operators are left-associative.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Context, Decimal

from exactcalc.core.ir.expressions import BinaryExpr, BinaryOp, Expr


@dataclass(frozen=True)
class Operator:
    """An entry of the operator table."""

    op: BinaryOp
    precedence: int
    combine: Callable[[Context, Decimal, Decimal], Decimal]

    @property
    def symbol(self) -> str:
        return self.op.value


_OPERATORS: dict[str, Operator] = {
    op.symbol: op
    for op in (
        Operator(BinaryOp.ADD, 1, Context.add),
        Operator(BinaryOp.SUB, 1, Context.subtract),
        Operator(BinaryOp.MUL, 2, Context.multiply),
        Operator(BinaryOp.DIV, 2, Context.divide),
    )
}


def is_defined(symbol: str) -> bool:
    """Check whether ``symbol`` is one of ``+ - * /``."""
    return symbol in _OPERATORS


def lookup(symbol: str) -> Operator:
    """Return the table entry for an operator symbol.

    Raises:
        KeyError: If the symbol is not an operator.
    """
    try:
        return _OPERATORS[symbol]
    except KeyError:
        raise KeyError(f"Undefined operator: {symbol!r}") from None


def precedence(op: BinaryOp) -> int:
    return _OPERATORS[op.value].precedence


def apply(op: BinaryOp, left: Expr, right: Expr) -> BinaryExpr:
    """Combine two operand nodes into a binary expression node."""
    return BinaryExpr(op=op, left=left, right=right)


def combine(op: BinaryOp, left: Decimal, right: Decimal, context: Context) -> Decimal:
    """Apply the arithmetic of ``op`` under ``context``.

    Division by zero raises ``decimal.DivisionByZero`` (or
    ``decimal.InvalidOperation`` for 0/0) when the context traps it.
    """
    return _OPERATORS[op.value].combine(context, left, right)
