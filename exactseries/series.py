"""Truncated power series for ``exp`` and ``log`` in exact rational arithmetic.

Both functions work on any exact rational type supporting ``+ - * /`` with
integers (:class:`~exactseries.rational.Rational` or
:class:`fractions.Fraction`); the zero and one they start from are taken
from the operand, so a ``Fraction`` argument yields a ``Fraction`` result.
Integers, floats, decimals and NumPy scalars are promoted to an exact
:class:`~exactseries.rational.Rational` first. No floating-point value is
ever used in the computation.
"""
from __future__ import annotations

import numbers
import warnings
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Tuple, Union

import numpy as np

from .rational import Rational, as_rational_array

Exact = Union[Rational, Fraction]


def _check_terms(terms: Any) -> int:
    if isinstance(terms, bool) or not isinstance(terms, numbers.Integral):
        raise TypeError(f"terms must be an integer, got {type(terms)!r}")
    terms = int(terms)
    if terms < 0:
        raise ValueError("terms must be non-negative")
    return terms


def _as_exact(value: Any, *, name: str) -> Exact:
    if isinstance(value, Rational):
        if not value.is_exact:
            warnings.warn(
                f"{name} has max_denominator={value.max_denominator}; "
                "the series result is rounded, not exact",
                stacklevel=3,
            )
        return value
    if isinstance(value, Fraction):
        return value
    if isinstance(value, numbers.Rational):
        # Integers and foreign exact fraction types, converted without float.
        return Rational.rationalize(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"{name} must be finite, got {value}")
        return Rational.from_fraction(Fraction(value))
    if isinstance(value, np.generic):
        return _as_exact(value.item(), name=name)
    if isinstance(value, numbers.Real):
        return Rational.rationalize(value)
    raise TypeError(f"{name} must be a real number, got {type(value)!r}")


def _units(value: Exact) -> Tuple[Exact, Exact]:
    zero = value * 0
    return zero, zero + 1


def _elementwise(func: Callable[[Any, int], Exact], values: Any, terms: int) -> "np.ndarray":
    array = as_rational_array(values, copy=False)
    vectorised = np.vectorize(lambda item: func(item, terms), otypes=[object])
    return vectorised(array)


def exp_series(power: Any, terms: int) -> Exact:
    """Return ``sum(power**t / t! for t in range(terms))``.

    This is the Maclaurin series of ``e**power`` truncated after *terms*
    terms: zero terms give ``0``, one term gives ``1``. Any rational
    *power* is accepted. Arrays, lists and tuples are evaluated element-wise
    and returned as an object array.

    Raises :class:`ValueError` if *terms* is negative.
    """
    terms = _check_terms(terms)
    if isinstance(power, (np.ndarray, list, tuple)):
        return _elementwise(exp_series, power, terms)

    power = _as_exact(power, name="power")
    zero, one = _units(power)
    if terms == 0:
        return zero
    if terms == 1:
        return one

    xn = one
    factorial = 1
    total = one
    for t in range(1, terms):
        xn *= power
        factorial *= t
        total += xn / factorial
    return total


def log_series(x: Any, terms: int) -> Exact:
    """Approximate ``ln(x)`` with *terms* terms of the artanh series.

    With ``factor = (x - 1) / (x + 1)`` the result is
    ``2 * sum(factor**(2k+1) / (2k+1) for k in range(terms))``. The series
    converges for every positive ``x`` but slowly when ``x`` is far from 1.
    Arrays, lists and tuples are evaluated element-wise.

    Raises :class:`ZeroDivisionError` at ``x == 1``, :class:`ValueError` for
    ``x <= 0`` or a negative *terms*.
    """
    terms = _check_terms(terms)
    if isinstance(x, (np.ndarray, list, tuple)):
        return _elementwise(log_series, x, terms)

    x = _as_exact(x, name="x")
    zero, one = _units(x)
    if x == one:
        raise ZeroDivisionError("log_series is undefined at x == 1: 1/(x - 1) divides by zero")
    if x <= zero:
        raise ValueError(f"x must be positive, got {x}")
    if terms == 0:
        return zero

    n = one / (x - one)
    factor = one / (2 * n + one)
    factor_squared = factor * factor
    total = factor
    power = 3
    for _ in range(1, terms):
        factor *= factor_squared
        total += factor / power
        power += 2
    return 2 * total


__all__ = ["exp_series", "log_series"]
