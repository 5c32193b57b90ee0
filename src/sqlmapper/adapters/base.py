"""
Adapter protocol and connection configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from ..config import parse_bool, parse_float, parse_int
from ..dialects.base import Dialect
from ..errors import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    AdapterExecutionError,
    AdapterTransactionError,
)
from .dsn import DSNConfig, parse_dsn

__all__ = [
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "AdapterError",
    "AdapterExecutionError",
    "AdapterTransactionError",
    "ConnectionConfig",
    "DatabaseAdapter",
]


@dataclass
class ConnectionConfig:
    """
    Normalized connection configuration for adapters.
    """

    url: str
    autocommit: bool = False
    isolation_level: str | None = None
    timeout: float | None = None
    options: dict[str, Any] | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "ConnectionConfig":
        """
        Build a connection config by parsing the DSN string.

        ``autocommit``, ``timeout`` and ``isolation_level`` query parameters
        become config fields; everything else is handed to the driver as an
        option. Keyword arguments win over values found in the DSN.
        """

        parsed = parse_dsn(dsn)
        query = dict(parsed.query)

        options: dict[str, Any] = {}
        parsed_autocommit = parse_bool(query.pop("autocommit"), key="autocommit") if "autocommit" in query else False
        parsed_timeout = parse_float(query.pop("timeout"), key="timeout") if "timeout" in query else None
        parsed_isolation = query.pop("isolation_level", None)
        for key, value in query.items():
            options[key] = parse_int(value, key=key) if key == "connect_timeout" else value
        options.update(kwargs.pop("options", None) or {})

        return cls(
            url=dsn,
            dsn=parsed,
            autocommit=kwargs.pop("autocommit", parsed_autocommit),
            timeout=kwargs.pop("timeout", parsed_timeout),
            isolation_level=kwargs.pop("isolation_level", parsed_isolation),
            options=options or None,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **kwargs)

    @property
    def scheme(self) -> str:
        if self.dsn:
            return self.dsn.driver
        return self.url.split(":", 1)[0] if ":" in self.url else ""

    def redacted_dsn(self) -> str:
        """
        Return a DSN safe for logging (credentials removed).
        """

        if self.dsn:
            return self.dsn.redacted()
        return self.url

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted


class DatabaseAdapter(Protocol):
    """
    A single physical connection as seen by mappers and the unit of work.
    """

    dialect: Dialect

    def connect(self, config: ConnectionConfig) -> Any:
        """
        Establish a connection handle using the supplied configuration.
        """

    def close(self) -> None:
        """
        Close underlying resources. Implementations should be idempotent.
        """

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> Any:
        """
        Execute a single SQL statement returning a cursor-like object with ``rowcount``.
        """

    def begin(self) -> None:
        """
        Start a transaction.
        """

    def commit(self) -> None:
        """
        Commit the current transaction.
        """

    def rollback(self) -> None:
        """
        Roll back the current transaction.
        """

    def last_insert_id(self, cursor: Any, table: str, pk_column: str) -> Any:
        """
        Retrieve the primary key value generated by the previous insert.
        """
