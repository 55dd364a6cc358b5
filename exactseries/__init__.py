"""Exact rational power series for exp and log."""

from .config import (
    DEFAULT_EXP_TERMS,
    DEFAULT_LOG_TERMS,
    SeriesConfig,
    load_parfile,
)
from .convergence import SeriesReport, convergence_table
from .rational import (
    DEFAULT_MAX_DENOMINATOR,
    Rational,
    as_rational_array,
    rationalize,
)
from .series import exp_series, log_series

__all__ = [
    "Rational",
    "rationalize",
    "DEFAULT_MAX_DENOMINATOR",
    "as_rational_array",
    "exp_series",
    "log_series",
    "SeriesConfig",
    "load_parfile",
    "DEFAULT_EXP_TERMS",
    "DEFAULT_LOG_TERMS",
    "SeriesReport",
    "convergence_table",
]
