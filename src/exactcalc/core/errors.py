"""
Error types for expression parsing, argument binding, and configuration.

Arithmetic faults raised while evaluating (division by zero, 0/0, overflow)
are not wrapped here: they propagate as the ``decimal`` signals raised by the
evaluation context, all of which are ``ArithmeticError`` subclasses.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class ExactCalcError(Exception):
    """Base exception for all exactcalc errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message

    @property
    def position(self) -> int | None:
        """Zero-based offset of the offending character, if known."""
        return self.context.position if self.context else None


class ExpressionSyntaxError(ExactCalcError, SyntaxError):
    """
    Raised when expression text cannot be parsed.

    Examples:
    - Invalid character (``2^3``)
    - Unbalanced parentheses (``(2+3``, ``2+3)``)
    - Missing operand or operator (``1+``, ``a1``)
    - Malformed numeric literal (``2e``)
    """

    pass


class ArgumentError(ExactCalcError, ValueError):
    """
    Raised when bindings do not match a compiled expression's variables.

    Examples:
    - More or fewer bindings than variables
    - A required variable name is absent
    - A bound value is not a finite number
    """

    def __init__(
        self,
        message: str,
        missing: Sequence[str] = (),
        context: ErrorContext | None = None,
    ):
        self.missing = tuple(missing)
        super().__init__(message, context)


class ConfigError(ExactCalcError):
    """Raised when evaluator configuration holds an invalid value."""

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside an expression.

    Attributes:
        source: The full expression text
        position: Zero-based offset of the offending character
    """

    source: str
    position: int

    def format(self) -> str:
        """
        Format the source with a marker under the error position.

        Returns:
            Two lines: the expression and a caret, e.g.::

                2^3
                 ^
        """
        line = self.source.replace("\n", " ").replace("\t", " ")
        marker = " " * min(self.position, len(line)) + "^"
        return f"  {line}\n  {marker}"


def make_syntax_error(message: str, source: str, position: int) -> ExpressionSyntaxError:
    """
    Helper to create an ExpressionSyntaxError with context.

    Args:
        message: Error description
        source: Expression text being parsed
        position: Zero-based offset of the error

    Returns:
        ExpressionSyntaxError with context attached
    """
    return ExpressionSyntaxError(message, ErrorContext(source=source, position=position))
