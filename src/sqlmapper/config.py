"""
Runtime configuration for units of work and adapters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import AdapterConfigurationError

ENV_PREFIX = "SQLMAPPER_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise AdapterConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def parse_int(value: str, *, key: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


def parse_float(value: str, *, key: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid float value for '{key}': {value!r}") from exc


def resolve_slow_query_ms(*, default: int, override: Optional[int] = None) -> int:
    """
    Pick the slow query threshold: explicit override, then environment, then default.
    """

    if override is not None:
        return override
    key = f"{ENV_PREFIX}SLOW_QUERY_MS"
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return parse_int(value, key=key)


@dataclass(frozen=True)
class UnitOfWorkConfig:
    """
    Behaviour switches for :class:`~sqlmapper.persistence.UnitOfWork`.

    ``clear_on_success`` empties the entity registry after a committed batch
    so the same unit of work can be reused; failed batches always keep their
    pending operations for inspection.
    """

    clear_on_success: bool = True
    slow_query_ms: int = 100

    @classmethod
    def from_env(cls, **overrides) -> "UnitOfWorkConfig":
        key = f"{ENV_PREFIX}CLEAR_ON_SUCCESS"
        raw = os.getenv(key)
        values = {
            "clear_on_success": parse_bool(raw, key=key) if raw else cls.clear_on_success,
            "slow_query_ms": resolve_slow_query_ms(default=cls.slow_query_ms),
        }
        values.update(overrides)
        return cls(**values)
