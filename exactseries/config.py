"""Run parameters for the series drivers, read from TOML parfiles.

A parfile is a flat TOML table; every key is optional::

    exp_terms = 50
    log_terms = 1000
    table_terms = 20
    digits = 30
    max_denominator = 0   # 0 keeps arithmetic exact
"""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

DEFAULT_EXP_TERMS = 50
DEFAULT_LOG_TERMS = 1000
DEFAULT_TABLE_TERMS = 20
DEFAULT_DIGITS = 30


def _ensure_count(value: Any, *, name: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class SeriesConfig:
    exp_terms: int = DEFAULT_EXP_TERMS
    log_terms: int = DEFAULT_LOG_TERMS
    table_terms: int = DEFAULT_TABLE_TERMS
    digits: int = DEFAULT_DIGITS
    max_denominator: Optional[int] = None

    def __post_init__(self) -> None:
        _ensure_count(self.exp_terms, name="exp_terms")
        _ensure_count(self.log_terms, name="log_terms")
        _ensure_count(self.table_terms, name="table_terms", minimum=1)
        _ensure_count(self.digits, name="digits")
        if self.max_denominator is not None:
            _ensure_count(self.max_denominator, name="max_denominator", minimum=1)

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "SeriesConfig":
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            raise ValueError(f"Unknown parfile keys: {', '.join(unknown)}")
        values = dict(params)
        # A bound of 0 in a parfile means no bound.
        if values.get("max_denominator") == 0:
            values["max_denominator"] = None
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "SeriesConfig":
        """Return a copy with every override that is not ``None`` applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def load_parfile(path: Union[str, Path]) -> SeriesConfig:
    parfile = Path(path).expanduser()
    if not parfile.exists():
        raise FileNotFoundError(f"Parfile not found: {parfile}")
    with parfile.open("rb") as f:
        try:
            params = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid parfile {parfile}: {exc}") from exc
    return SeriesConfig.from_params(params)


__all__ = [
    "DEFAULT_DIGITS",
    "DEFAULT_EXP_TERMS",
    "DEFAULT_LOG_TERMS",
    "DEFAULT_TABLE_TERMS",
    "SeriesConfig",
    "load_parfile",
]
