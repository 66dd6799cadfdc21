"""
Expression executor for the exactcalc expression language.

Binds caller values to a compiled expression's variables by position and
evaluates the tree to a single Decimal. Pure evaluation: no I/O, no shared
mutable state, and no use of Python's eval(). Each call works on its own
argument vector and its own copy of the decimal context, so a compiled
expression may be executed concurrently from several threads.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Context, Decimal
from typing import Any

from exactcalc.core.config import EvaluatorConfig, default_context
from exactcalc.core.errors import ArgumentError
from exactcalc.core.expression_lang import operators
from exactcalc.core.expression_lang.numeric import to_decimal
from exactcalc.core.expression_lang.parser import parse
from exactcalc.core.ir.expressions import (
    BinaryExpr,
    CompiledExpression,
    Expr,
    Literal,
    Variable,
)

Bindings = Mapping[str, Any]


def execute(
    compiled: CompiledExpression,
    bindings: Bindings | None = None,
    *,
    context: Context | None = None,
) -> Decimal:
    """Evaluate a compiled expression with the given variable values.

    Args:
        compiled: Result of parse().
        bindings: Variable name -> number. Must name exactly the
            expression's variables.
        context: Decimal context for the arithmetic. Defaults to 28
            significant digits, half-even rounding.

    Returns:
        The computed value.

    Raises:
        ArgumentError: If bindings do not match the expression's variables.
        ArithmeticError: On division by zero or another trapped decimal
            signal (raised as the matching ``decimal`` exception).
    """
    ctx = (context or default_context()).copy()
    arguments = bind_arguments(compiled, bindings or {}, ctx)
    return _interpret(compiled.root, arguments, ctx)


def bind_arguments(
    compiled: CompiledExpression, bindings: Bindings, context: Context
) -> tuple[Decimal, ...]:
    """Build the positional argument vector for ``compiled``.

    Slot ``i`` holds the value bound to ``compiled.variables[i]``.
    """
    expected = compiled.variable_count
    if expected != len(bindings):
        raise ArgumentError(
            f"Expression contains {expected} parameters but got {len(bindings)}",
            missing=[name for name in compiled.variables if name not in bindings],
        )

    missing = [name for name in compiled.variables if name not in bindings]
    if missing:
        raise ArgumentError(
            "No values provided for parameters: " + ",".join(missing),
            missing=missing,
        )

    values: list[Decimal] = []
    for name in compiled.variables:
        try:
            values.append(to_decimal(bindings[name], context))
        except (TypeError, ValueError) as e:
            raise ArgumentError(f"Invalid value for parameter {name!r}: {e}") from e
    return tuple(values)


def _interpret(root: Expr, arguments: tuple[Decimal, ...], context: Context) -> Decimal:
    """Evaluate the tree bottom-up with an explicit stack."""
    values: list[Decimal] = []
    pending: list[tuple[Expr, bool]] = [(root, False)]

    while pending:
        node, children_done = pending.pop()

        if isinstance(node, Literal):
            values.append(node.value)
        elif isinstance(node, Variable):
            values.append(arguments[node.index])
        elif isinstance(node, BinaryExpr):
            if children_done:
                right = values.pop()
                left = values.pop()
                values.append(operators.combine(node.op, left, right, context))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        else:
            raise TypeError(f"Unknown expression type: {type(node).__name__}")

    return values.pop()


class ExpressionFunction:
    """A compiled expression paired with the executor.

    Parse once, then call with fresh bindings as often as needed::

        fn = compile_expr("(a + b) / (a + c)")
        fn({"a": 6, "b": 3.9, "c": 4.9})
        fn({"a": 5.4, "b": -2.4, "c": 7.5})
    """

    __slots__ = ("expression", "_config")

    def __init__(self, expression: CompiledExpression, config: EvaluatorConfig) -> None:
        self.expression = expression
        self._config = config

    @property
    def variables(self) -> tuple[str, ...]:
        return self.expression.variables

    def __call__(self, bindings: Bindings | None = None) -> Decimal:
        return execute(self.expression, bindings, context=self._config.context())

    def __repr__(self) -> str:
        return f"ExpressionFunction({self.expression.source!r}, variables={self.variables})"


def compile_expr(source: str, *, config: EvaluatorConfig | None = None) -> ExpressionFunction:
    """Parse ``source`` once and return a reusable callable.

    Raises:
        ExpressionSyntaxError: If the expression is invalid.
    """
    config = config or EvaluatorConfig()
    return ExpressionFunction(parse(source, context=config.context()), config)


def evaluate(
    source: str,
    bindings: Bindings | None = None,
    *,
    config: EvaluatorConfig | None = None,
) -> Decimal:
    """Parse and execute an expression in one step.

    Usage:
        evaluate("a + b", {"a": Decimal("2.6"), "b": Decimal("5.7")})
        # Decimal('8.3')
    """
    return compile_expr(source, config=config)(bindings)
