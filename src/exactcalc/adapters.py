"""
Convenience layer over the core evaluator.

Lets callers supply variable values as keyword arguments or as an object
whose public numeric attributes become bindings, instead of building a
name -> value mapping by hand::

    evaluator = ExpressionEvaluator()
    evaluator.evaluate("(c + b) * a", a=6, b=4.5, c=2.6)
    evaluator.evaluate("width * height", Box(width=2, height=3))

Values whose type is not numeric are skipped, so an object may carry other
fields alongside the ones an expression uses.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from exactcalc.core.config import EvaluatorConfig, load_config
from exactcalc.core.errors import ArgumentError
from exactcalc.core.expression_lang import compile_expr, is_numeric_type, to_decimal

logger = logging.getLogger(__name__)


def bindings_from_object(argument: Any) -> dict[str, Decimal]:
    """Collect numeric bindings from a mapping, model, or plain object.

    Args:
        argument: None, a mapping, a pydantic model, or any object with
            public attributes or properties.

    Returns:
        Name -> Decimal for every member whose value is numeric.

    Raises:
        ArgumentError: If a numeric member is NaN or infinite.
    """
    if argument is None:
        return {}

    bindings: dict[str, Decimal] = {}
    for name, value in _public_members(argument):
        if is_numeric_type(type(value)):
            try:
                bindings[name] = to_decimal(value)
            except (TypeError, ValueError) as e:
                raise ArgumentError(f"Invalid value for parameter {name!r}: {e}") from e
        else:
            logger.debug("Skipping non-numeric member %r (%s)", name, type(value).__name__)
    return bindings


def _public_members(argument: Any) -> Iterator[tuple[str, Any]]:
    """Yield (name, value) for the members that may become bindings."""
    if isinstance(argument, Mapping):
        yield from ((str(k), v) for k, v in argument.items())
        return

    if isinstance(argument, BaseModel):
        for name in type(argument).model_fields:
            yield name, getattr(argument, name)
        return

    names = list(getattr(argument, "__dict__", {}))
    names += [name for name, attr in inspect.getmembers(type(argument)) if isinstance(attr, property)]
    for name in names:
        if not name.startswith("_"):
            yield name, getattr(argument, name)


class ExpressionEvaluator:
    """Evaluate expressions with object or keyword-argument bindings."""

    def __init__(self, config: EvaluatorConfig | None = None) -> None:
        self.config = config or load_config()

    def evaluate(self, source: str, argument: Any = None, /, **named: Any) -> Decimal:
        """Evaluate ``source``.

        Bindings come from ``argument`` (see bindings_from_object) with
        keyword arguments taking precedence on name clashes.
        """
        fn = compile_expr(source, config=self.config)
        return fn(self._bindings(argument, named))

    def compile(self, source: str) -> Callable[..., Decimal]:
        """Parse ``source`` once; the result accepts the same arguments as evaluate()."""
        fn = compile_expr(source, config=self.config)
        logger.debug("Compiled %r with variables %s", source, list(fn.variables))

        def run(argument: Any = None, /, **named: Any) -> Decimal:
            return fn(self._bindings(argument, named))

        return run

    @staticmethod
    def _bindings(argument: Any, named: Mapping[str, Any]) -> dict[str, Decimal]:
        bindings = bindings_from_object(argument)
        bindings.update(bindings_from_object(named))
        return bindings
