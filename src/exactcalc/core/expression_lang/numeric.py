"""
Numeric helpers for binding caller values.

Decides which Python values count as numbers and converts them to Decimal
without a binary floating-point detour where one can be avoided.
"""

from __future__ import annotations

import math
import numbers
from decimal import Context, Decimal
from typing import Any


def is_numeric_type(candidate: Any) -> bool:
    """Check whether values of ``candidate`` type can be bound as decimals.

    Accepts ints, floats, Decimals, Fractions and any type registered as
    ``numbers.Real`` (e.g. numpy scalars). ``bool`` is excluded even though
    it subclasses ``int``; non-types return False.

    Examples:
        >>> is_numeric_type(Decimal)
        True
        >>> is_numeric_type(bool)
        False
    """
    if not isinstance(candidate, type):
        return False
    if issubclass(candidate, bool):
        return False
    return issubclass(candidate, (numbers.Real, Decimal))


def to_decimal(value: Any, context: Context | None = None) -> Decimal:
    """Convert a numeric value to a finite Decimal.

    Floats go through their shortest ``repr`` so that ``2.6`` becomes
    ``Decimal("2.6")`` rather than its exact binary expansion. Rationals are
    divided under ``context``.

    Raises:
        TypeError: If the value's type is not numeric.
        ValueError: If the value is NaN or infinite.
    """
    if not is_numeric_type(type(value)):
        raise TypeError(f"Expected a number, got {type(value).__name__}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, numbers.Integral):
        result = Decimal(int(value))
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Expected a finite number, got {value!r}")
        result = Decimal(repr(float(value)))
    elif isinstance(value, numbers.Rational):
        ctx = context or Context()
        result = ctx.divide(Decimal(value.numerator), Decimal(value.denominator))
    else:
        return to_decimal(float(value), context)

    if not result.is_finite():
        raise ValueError(f"Expected a finite number, got {value!r}")
    return result
