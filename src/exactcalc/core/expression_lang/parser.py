"""
Shunting-yard parser for the exactcalc expression language.

Consumes the token stream once, left to right, with two stacks: operand
nodes and pending operators (``(`` sits on the operator stack as a barrier).
Whenever an operator of lower or equal precedence arrives, pending operators
are folded into BinaryExpr nodes, so ties resolve left to right.

Grammar (precedence low to high):
    expr    → term (("+" | "-") term)*
    term    → operand (("*" | "/") operand)*
    operand → NUMBER | IDENT | "(" expr ")"
    NUMBER  → ["+" | "-"] digits ["." digits] [("e" | "E") ["+" | "-"] digits]
    IDENT   → letter+

A sign belongs to a NUMBER only at the start of the expression or directly
after ``*``, ``/`` or ``(``. Identifiers are letters only, so ``a1`` is a
variable followed by a literal with no operator between them: a syntax error.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import Context, Decimal

from exactcalc.core.config import default_context
from exactcalc.core.errors import ExpressionSyntaxError, make_syntax_error
from exactcalc.core.expression_lang import operators
from exactcalc.core.expression_lang.tokenizer import Token, TokenKind, scan
from exactcalc.core.ir.expressions import (
    BinaryOp,
    CompiledExpression,
    Expr,
    Literal,
    Variable,
)

# Operator stack marker for "("
_BARRIER = None

# Token kinds that complete an operand
_OPERAND_END = frozenset({TokenKind.NUMBER, TokenKind.IDENT, TokenKind.RPAREN})


class _Parser:
    """Two-stack parser state for a single call to parse()."""

    def __init__(self, source: str, context: Context) -> None:
        self.source = source
        self.context = context
        self.operand_stack: list[Expr] = []
        self.operator_stack: list[BinaryOp | None] = []
        self.variables: dict[str, int] = {}

    def error(self, message: str, pos: int) -> ExpressionSyntaxError:
        return make_syntax_error(message, self.source, pos)

    def parse(self) -> CompiledExpression:
        prev: Token | None = None

        for tok in scan(self.source):
            if tok.kind in (TokenKind.NUMBER, TokenKind.IDENT):
                if prev is not None and prev.kind in _OPERAND_END:
                    raise self.error(f"Missing operator before {tok.value!r}", tok.pos)
                self.operand_stack.append(self.read_operand(tok))

            elif tok.kind == TokenKind.LPAREN:
                if prev is not None and prev.kind in _OPERAND_END:
                    raise self.error("Missing operator before '('", tok.pos)
                self.operator_stack.append(_BARRIER)

            elif tok.kind == TokenKind.RPAREN:
                if prev is None or prev.kind not in _OPERAND_END:
                    raise self.error("Missing operand before ')'", tok.pos)
                self.reduce_while(lambda top: top is not _BARRIER)
                if not self.operator_stack:
                    raise self.error("Unbalanced parentheses: no matching '('", tok.pos)
                self.operator_stack.pop()

            else:
                if prev is None or prev.kind not in _OPERAND_END:
                    raise self.error(f"Missing operand before {tok.value!r}", tok.pos)
                current = operators.lookup(tok.value)
                self.reduce_while(
                    lambda top: top is not _BARRIER
                    and operators.precedence(top) >= current.precedence
                )
                self.operator_stack.append(current.op)

            prev = tok

        end = len(self.source)
        if prev is not None and prev.kind not in _OPERAND_END:
            raise self.error("Unexpected end of expression", end)

        self.reduce_while(lambda top: top is not _BARRIER)
        if self.operator_stack:
            raise self.error("Unbalanced parentheses: missing ')'", end)
        if len(self.operand_stack) != 1:
            raise self.error("Malformed expression", end)

        return CompiledExpression(
            source=self.source,
            root=self.operand_stack[0],
            variables=tuple(self.variables),
        )

    def reduce_while(self, condition: Callable[[BinaryOp | None], bool]) -> None:
        """Fold pending operators into nodes while ``condition(top)`` holds."""
        while self.operator_stack and condition(self.operator_stack[-1]):
            op = self.operator_stack.pop()
            right = self.operand_stack.pop()
            left = self.operand_stack.pop()
            self.operand_stack.append(operators.apply(op, left, right))

    def read_operand(self, tok: Token) -> Expr:
        if tok.kind == TokenKind.IDENT:
            index = self.variables.setdefault(tok.value, len(self.variables))
            return Variable(index=index)
        return Literal(value=self.read_number(tok))

    def read_number(self, tok: Token) -> Decimal:
        """Convert a NUMBER token to a Decimal.

        Literals with an exponent are parsed as a float first and then
        rounded to 15 significant digits, the precision a double holds
        reliably. Plain literals are exact.
        """
        text = tok.value
        negative = text.startswith("-")
        digits = text.lstrip("+-")

        if "e" not in digits and "E" not in digits:
            value = Decimal(digits)
            return value.copy_negate() if negative else value

        try:
            number = float(digits)
        except ValueError:
            raise self.error(f"Malformed numeric literal {text!r}", tok.pos) from None
        if not math.isfinite(number):
            raise self.error(f"Numeric literal out of range {text!r}", tok.pos)
        if negative:
            number = -number
        return self.context.create_decimal(format(number, ".15g"))


def parse(source: str, *, context: Context | None = None) -> CompiledExpression:
    """Parse an expression string into a compiled expression.

    Args:
        source: Expression text (e.g., "(a + b) / 2")
        context: Decimal context used to convert exponent literals.
            Defaults to 28 significant digits, half-even rounding.

    Returns:
        CompiledExpression whose variables are listed in first-occurrence
        order. Empty or blank text yields the literal 0 with no variables.

    Raises:
        ExpressionSyntaxError: If the expression is invalid.
    """
    if not source or source.isspace():
        return CompiledExpression(source=source, root=Literal(value=Decimal(0)))

    parser = _Parser(source, context or default_context())
    return parser.parse()
