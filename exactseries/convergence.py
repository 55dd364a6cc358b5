"""Compare successive series truncations against a floating-point oracle."""
from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

import numpy as np

from .rational import Rational
from .series import exp_series, log_series

_FUNCTIONS: Dict[str, Tuple[Callable[[Any, int], Any], Callable[[float], float]]] = {
    "exp": (exp_series, math.exp),
    "log": (log_series, math.log),
}


@dataclass
class SeriesReport:
    function: str
    argument: Rational
    partial_sums: List[Rational]
    oracle: float
    errors: np.ndarray

    @property
    def terms(self) -> int:
        return len(self.partial_sums)

    @property
    def final_error(self) -> float:
        return float(self.errors[-1])

    @property
    def linf_error(self) -> float:
        return float(np.max(self.errors))

    def is_non_increasing(self, tolerance: float | None = None) -> bool:
        """Whether the error never grows by more than *tolerance* between terms.

        The default tolerance is a few ulps of the oracle, the resolution at
        which float comparisons stop meaning anything.
        """
        if tolerance is None:
            tolerance = 4 * math.ulp(max(1.0, abs(self.oracle)))
        return bool(np.all(np.diff(self.errors) <= tolerance))


def convergence_table(function: str, value: Any, terms: int) -> SeriesReport:
    """Evaluate *function* at *value* with 1 .. *terms* terms.

    Each partial sum is computed independently and exactly; only the error
    column is measured in floating point.
    """
    try:
        series, oracle_fn = _FUNCTIONS[function]
    except KeyError:
        choices = ", ".join(sorted(_FUNCTIONS))
        raise ValueError(f"Unknown series {function!r}; expected one of {choices}") from None
    if terms < 1:
        raise ValueError("terms must be at least 1")

    argument = Rational.rationalize(value)
    partial_sums = [series(argument, count) for count in range(1, terms + 1)]
    try:
        oracle = oracle_fn(float(argument))
        approximations = np.array([float(item) for item in partial_sums])
    except OverflowError as exc:
        raise ValueError(
            f"{function}({argument}) or its partial sums exceed the float range "
            f"of the {function} oracle (max {sys.float_info.max:.3e})"
        ) from exc
    errors = np.abs(approximations - oracle)

    return SeriesReport(
        function=function,
        argument=argument,
        partial_sums=partial_sums,
        oracle=oracle,
        errors=errors,
    )


__all__ = ["SeriesReport", "convergence_table"]
