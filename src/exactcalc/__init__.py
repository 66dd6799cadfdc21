"""
exactcalc - exact decimal arithmetic expressions with named variables.

Parses ``+ - * /`` expressions with parentheses once, then evaluates them
any number of times against fresh variable bindings.
"""

from __future__ import annotations

from ._version import get_version
from .adapters import ExpressionEvaluator, bindings_from_object
from .core.config import EvaluatorConfig, load_config
from .core.errors import ArgumentError, ConfigError, ExactCalcError, ExpressionSyntaxError
from .core.expression_lang import (
    ExpressionFunction,
    compile_expr,
    evaluate,
    execute,
    is_numeric_type,
    parse,
)
from .core.ir import CompiledExpression

__version__ = get_version()

__all__ = [
    "__version__",
    "ArgumentError",
    "CompiledExpression",
    "ConfigError",
    "EvaluatorConfig",
    "ExactCalcError",
    "ExpressionEvaluator",
    "ExpressionFunction",
    "ExpressionSyntaxError",
    "bindings_from_object",
    "compile_expr",
    "evaluate",
    "execute",
    "is_numeric_type",
    "load_config",
    "parse",
]
