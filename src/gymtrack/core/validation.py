"""
Numeric input boundary for the calculation core.

Values reaching the core come straight from user input and are not
trusted.  These helpers coerce them to a float or report them unusable
(None), so formulas downstream only ever see finite numbers.
"""

import math
from numbers import Real
from typing import Any


def finite_number(value: Any) -> float | None:
    """
    Return value as a float if it is a finite real number, else None.

    Booleans and strings are rejected even though Python can convert them.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def positive_finite(value: Any) -> float | None:
    """Return value as a float if it is finite and > 0, else None."""
    number = finite_number(value)
    if number is None or number <= 0:
        return None
    return number


def finite_or(value: Any, default: float) -> float:
    """Return value as a float, or *default* when it is not a finite number."""
    number = finite_number(value)
    return default if number is None else number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero for positives."""
    return math.floor(value + 0.5)
