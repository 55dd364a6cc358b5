"""Exact rational numbers with NumPy interoperability."""
from __future__ import annotations

import math
import numbers
import operator
from fractions import Fraction
from typing import Any, Callable, Optional, Tuple, Union

import numpy as np

NumberLike = Union["Rational", Fraction, numbers.Real]

# ``None`` keeps every value exact; a positive bound rounds results to the
# closest fraction whose denominator does not exceed it.
DEFAULT_MAX_DENOMINATOR: Optional[int] = None


def _check_max_denominator(max_denominator: Optional[int]) -> Optional[int]:
    if max_denominator is None:
        return None
    if isinstance(max_denominator, bool) or not isinstance(max_denominator, numbers.Integral):
        raise TypeError(f"max_denominator must be an integer, got {type(max_denominator)!r}")
    if max_denominator < 1:
        raise ValueError("max_denominator must be >= 1")
    return int(max_denominator)


def _coerce_to_fraction(value: Any, *, max_denominator: Optional[int]) -> Fraction:
    """Convert *value* into a :class:`Fraction`, exactly unless bounded."""

    if isinstance(value, Rational):
        return Fraction(value._numerator, value._denominator)
    if isinstance(value, Fraction):
        return value
    if isinstance(value, numbers.Integral):
        return Fraction(int(value), 1)
    if isinstance(value, numbers.Rational):
        return Fraction(int(value.numerator), int(value.denominator))
    if isinstance(value, np.generic):
        return _coerce_to_fraction(value.item(), max_denominator=max_denominator)
    if isinstance(value, numbers.Real):
        frac = Fraction.from_float(float(value))
        if max_denominator is not None and frac.denominator > max_denominator:
            frac = frac.limit_denominator(max_denominator)
        return frac
    raise TypeError(f"Cannot interpret {type(value)!r} as a rational component")


class Rational:
    """Rational number kept in lowest terms with a positive denominator.

    Arithmetic is exact unless the value carries a ``max_denominator``, in
    which case every result is rounded to the nearest fraction whose
    denominator stays within that bound.
    """

    __slots__ = ("_numerator", "_denominator", "_max_denominator")
    __array_priority__ = 1000.0  # Prefer Rational semantics in NumPy expressions.

    def __init__(
        self,
        numerator: NumberLike = 0,
        denominator: NumberLike = 1,
        *,
        max_denominator: Optional[int] = None,
    ) -> None:
        if max_denominator is None:
            max_denominator = DEFAULT_MAX_DENOMINATOR
        max_denominator = _check_max_denominator(max_denominator)

        if type(numerator) is int and type(denominator) is int:
            if denominator == 0:
                raise ZeroDivisionError("denominator must be non-zero")
            num, den = numerator, denominator
        else:
            num_fraction = _coerce_to_fraction(numerator, max_denominator=max_denominator)
            den_fraction = _coerce_to_fraction(denominator, max_denominator=max_denominator)
            if den_fraction == 0:
                raise ZeroDivisionError("denominator must be non-zero")
            combined = num_fraction / den_fraction
            num, den = combined.numerator, combined.denominator

        self._numerator, self._denominator = self._normalize(num, den, max_denominator)
        self._max_denominator = max_denominator

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def from_float(
        cls, value: float, *, max_denominator: Optional[int] = None
    ) -> "Rational":
        """Return the exact binary value of *value*, or its best bounded approximation."""
        if isinstance(value, bool):  # bool is a subclass of int; treat explicitly.
            return cls(int(value), 1, max_denominator=max_denominator)
        if math.isnan(value) or math.isinf(value):
            raise ValueError("cannot convert NaN or infinity to Rational")
        frac = Fraction.from_float(value)
        return cls.from_fraction(frac, max_denominator=max_denominator)

    @classmethod
    def from_fraction(
        cls, value: Fraction, *, max_denominator: Optional[int] = None
    ) -> "Rational":
        """Create a :class:`Rational` from :class:`fractions.Fraction`."""
        if max_denominator is not None:
            value = value.limit_denominator(max_denominator)
        return cls(value.numerator, value.denominator, max_denominator=max_denominator)

    @classmethod
    def parse(cls, text: str, *, max_denominator: Optional[int] = None) -> "Rational":
        """Parse ``"3/4"``, ``"-2"``, ``"0.125"`` or ``"1e-3"`` without going through float."""
        try:
            frac = Fraction(text.strip())
        except (ValueError, ZeroDivisionError) as exc:
            raise ValueError(f"Cannot parse {text!r} as a rational number") from exc
        return cls.from_fraction(frac, max_denominator=max_denominator)

    @classmethod
    def rationalize(
        cls, value: NumberLike, *, max_denominator: Optional[int] = None
    ) -> "Rational":
        """Coerce a numeric-like value into :class:`Rational`."""
        if isinstance(value, Rational):
            if max_denominator is None or max_denominator == value._max_denominator:
                return value
            return value.limit_denominator(max_denominator)
        if isinstance(value, Fraction):
            return cls.from_fraction(value, max_denominator=max_denominator)
        if isinstance(value, numbers.Integral):
            return cls(int(value), 1, max_denominator=max_denominator)
        if isinstance(value, numbers.Rational):
            return cls.from_fraction(
                Fraction(int(value.numerator), int(value.denominator)),
                max_denominator=max_denominator,
            )
        if isinstance(value, np.generic):
            return cls.rationalize(value.item(), max_denominator=max_denominator)
        if isinstance(value, numbers.Real):
            return cls.from_float(float(value), max_denominator=max_denominator)
        raise TypeError(f"Cannot convert {type(value)!r} to Rational")

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    @property
    def max_denominator(self) -> Optional[int]:
        return self._max_denominator

    @property
    def is_exact(self) -> bool:
        """``True`` when arithmetic on this value never rounds."""
        return self._max_denominator is None

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(self._numerator, self._denominator)

    def limit_denominator(self, max_denominator: Optional[int] = None) -> "Rational":
        """Return the closest :class:`Rational` whose denominator fits the bound."""
        if max_denominator is None:
            max_denominator = self._max_denominator
        if max_denominator is None:
            return self
        fraction = self.as_fraction().limit_denominator(max_denominator)
        return Rational(
            fraction.numerator,
            fraction.denominator,
            max_denominator=max_denominator,
        )

    def to_decimal(self, digits: int = 30) -> str:
        """Return the decimal expansion truncated toward zero after *digits* places.

        The expansion is produced by integer long division, so every printed
        digit is exact.
        """
        if digits < 0:
            raise ValueError("digits must be non-negative")
        sign = "-" if self._numerator < 0 else ""
        whole, remainder = divmod(abs(self._numerator), self._denominator)
        if digits == 0:
            return f"{sign}{whole}"
        fraction = remainder * 10 ** digits // self._denominator
        return f"{sign}{whole}.{fraction:0{digits}d}"

    # ------------------------------------------------------------------
    # Series
    def exp(self, terms: Optional[int] = None) -> "Rational":
        """Return the truncated Taylor series of ``e`` raised to this value."""
        from .config import DEFAULT_EXP_TERMS
        from .series import exp_series

        return exp_series(self, DEFAULT_EXP_TERMS if terms is None else terms)

    def log(self, terms: Optional[int] = None) -> "Rational":
        """Return the truncated series approximation of ``ln`` of this value."""
        from .config import DEFAULT_LOG_TERMS
        from .series import log_series

        return log_series(self, DEFAULT_LOG_TERMS if terms is None else terms)

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return self._numerator / self._denominator

    def __int__(self) -> int:
        return int(self._numerator // self._denominator)

    def __bool__(self) -> bool:
        return self._numerator != 0

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"Rational({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        try:
            return format(float(self), format_spec)
        except (ValueError, TypeError):
            return format(str(self), format_spec)

    # ------------------------------------------------------------------
    # Internal helpers
    def _coerce_scalar(self, value: Any) -> "Rational":
        if isinstance(value, Rational):
            return value
        if isinstance(value, numbers.Rational) and not isinstance(value, numbers.Integral):
            # Any exact fraction type, not only fractions.Fraction.
            value = Fraction(int(value.numerator), int(value.denominator))
        if isinstance(value, Fraction):
            max_den = self._max_denominator
            if max_den is not None:
                max_den = max(max_den, value.denominator)
            return Rational.from_fraction(value, max_denominator=max_den)
        if isinstance(value, numbers.Integral):
            return Rational(int(value), 1, max_denominator=self._max_denominator)
        if isinstance(value, np.generic):
            return self._coerce_scalar(value.item())
        if isinstance(value, numbers.Real):
            return Rational.from_float(float(value), max_denominator=self._max_denominator)
        raise TypeError(f"Cannot interpret {type(value)!r} as Rational")

    def _vectorize_iterable(self, iterable, func: Callable[[Any], Any]) -> "np.ndarray":
        return np.array([func(item) for item in iterable], dtype=object)

    def _binary_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self, self._coerce_scalar(x)),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return self._vectorize_iterable(
                other,
                lambda x: op(self, self._coerce_scalar(x)),
            )
        other_rat = self._coerce_scalar(other)
        return op(self, other_rat)

    def _reflected_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self._coerce_scalar(x), self),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return self._vectorize_iterable(
                other,
                lambda x: op(self._coerce_scalar(x), self),
            )
        return op(self._coerce_scalar(other), self)

    @staticmethod
    def _combine_max_denominator(a: "Rational", b: "Rational") -> Optional[int]:
        if a._max_denominator is None or b._max_denominator is None:
            return None
        return max(a._max_denominator, b._max_denominator)

    @staticmethod
    def _normalize(num: int, den: int, max_denominator: Optional[int]) -> Tuple[int, int]:
        if den < 0:
            num, den = -num, -den
        gcd = math.gcd(num, den)
        if gcd > 1:
            num //= gcd
            den //= gcd
        if max_denominator is not None and den > max_denominator:
            fraction = Fraction(num, den).limit_denominator(max_denominator)
            num, den = fraction.numerator, fraction.denominator
        return num, den

    def _coerce_power(self, value: Any) -> int:
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, (Rational, numbers.Rational)):
            if value.denominator != 1:
                raise ValueError("Exponent must be an integer")
            return int(value.numerator)
        if isinstance(value, np.generic):
            return self._coerce_power(value.item())
        if isinstance(value, numbers.Real):
            if not float(value).is_integer():
                raise ValueError("Exponent must be an integer")
            return int(value)
        raise TypeError("Unsupported exponent type")

    # ------------------------------------------------------------------
    # Arithmetic operators
    @staticmethod
    def _add(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._denominator + b._numerator * a._denominator,
            a._denominator * b._denominator,
            max_denominator=Rational._combine_max_denominator(a, b),
        )

    @staticmethod
    def _sub(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._denominator - b._numerator * a._denominator,
            a._denominator * b._denominator,
            max_denominator=Rational._combine_max_denominator(a, b),
        )

    @staticmethod
    def _mul(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._numerator,
            a._denominator * b._denominator,
            max_denominator=Rational._combine_max_denominator(a, b),
        )

    @staticmethod
    def _truediv(a: "Rational", b: "Rational") -> "Rational":
        if b._numerator == 0:
            raise ZeroDivisionError("division by zero")
        return Rational(
            a._numerator * b._denominator,
            a._denominator * b._numerator,
            max_denominator=Rational._combine_max_denominator(a, b),
        )

    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, self._add)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._add)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, self._sub)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._sub)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, self._mul)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._mul)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, self._truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._truediv)

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        power = self._coerce_power(exponent)
        if power >= 0:
            return Rational(
                self._numerator ** power,
                self._denominator ** power,
                max_denominator=self._max_denominator,
            )
        if self._numerator == 0:
            raise ZeroDivisionError("0 cannot be raised to a negative power")
        positive = -power
        return Rational(
            self._denominator ** positive,
            self._numerator ** positive,
            max_denominator=self._max_denominator,
        )

    def __neg__(self) -> "Rational":
        return Rational(
            -self._numerator,
            self._denominator,
            max_denominator=self._max_denominator,
        )

    def __pos__(self) -> "Rational":
        return self

    def __abs__(self) -> "Rational":
        return Rational(
            abs(self._numerator),
            self._denominator,
            max_denominator=self._max_denominator,
        )

    # ------------------------------------------------------------------
    # Comparisons
    def _compare(self, other: Any, op) -> bool:
        other_rat = self._coerce_scalar(other)
        return op(
            self._numerator * other_rat._denominator,
            other_rat._numerator * self._denominator,
        )

    def __eq__(self, other: Any) -> bool:
        try:
            return self._compare(other, operator.eq)
        except (TypeError, ValueError):
            return False

    def __lt__(self, other: Any) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> bool:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        # Matches hash(Fraction) and hash(int) for equal values.
        return hash(Fraction(self._numerator, self._denominator))

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.divide: operator.truediv,
        np.true_divide: operator.truediv,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.power: operator.pow,
        np.exp: lambda a: a.exp(),
        np.log: lambda a: a.log(),
    }

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Rational ufuncs")
        op = self._UFUNC_DISPATCH.get(ufunc)
        if op is None:
            return NotImplemented

        coerced = []
        has_array = False
        for value in inputs:
            if isinstance(value, Rational):
                coerced.append(value)
            elif isinstance(value, np.ndarray):
                vectorised = np.vectorize(lambda x: self._coerce_scalar(x), otypes=[object])
                coerced.append(vectorised(value))
                has_array = True
            else:
                coerced.append(self._coerce_scalar(value))
        if has_array:
            vectorised = np.vectorize(lambda *args: op(*args), otypes=[object])
            return vectorised(*coerced)
        return op(*coerced)


def rationalize(value: NumberLike, *, max_denominator: Optional[int] = None) -> Rational:
    """Public helper to convert *value* into :class:`Rational`."""

    return Rational.rationalize(value, max_denominator=max_denominator)


def as_rational_array(
    values: Any,
    *,
    max_denominator: Optional[int] = None,
    copy: bool = True,
) -> "np.ndarray":
    """Return a ``numpy.ndarray`` of :class:`Rational` values.

    ``values`` can be any iterable containing numeric-like entries or an existing
    NumPy array. When ``copy`` is ``False`` and ``values`` is already an object
    array holding only :class:`Rational` entries, that array is returned as is.
    """

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
        if array.dtype == object and all(isinstance(item, Rational) for item in array.flat):
            return array
        vectorised = np.vectorize(
            lambda item: Rational.rationalize(item, max_denominator=max_denominator),
            otypes=[object],
        )
        return vectorised(array.astype(object, copy=False))

    if isinstance(values, (list, tuple)):
        # Nested sequences become multi-dimensional object arrays.
        return as_rational_array(
            np.array(values, dtype=object), max_denominator=max_denominator, copy=False
        )

    return as_rational_array(list(values), max_denominator=max_denominator, copy=copy)


__all__ = [
    "Rational",
    "rationalize",
    "DEFAULT_MAX_DENOMINATOR",
    "as_rational_array",
]
