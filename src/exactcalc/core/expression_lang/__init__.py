"""
exactcalc expression language.

Tokenizer, shunting-yard parser, operator table and executor for exact
decimal arithmetic over + - * / with parentheses and named variables.

Usage:
    from exactcalc.core.expression_lang import compile_expr, evaluate, parse

    evaluate("a + b", {"a": 2.6, "b": 5.7})
    # Decimal('8.3')

    fn = compile_expr("(a + b) / 2")
    fn({"a": 1, "b": 2})
    # Decimal('1.5')
"""

from exactcalc.core.expression_lang.executor import (
    ExpressionFunction,
    compile_expr,
    evaluate,
    execute,
)
from exactcalc.core.expression_lang.numeric import is_numeric_type, to_decimal
from exactcalc.core.expression_lang.parser import parse

__all__ = [
    "ExpressionFunction",
    "compile_expr",
    "evaluate",
    "execute",
    "is_numeric_type",
    "parse",
    "to_decimal",
]
