"""
Database adapters acting as the physical connections of a unit of work.
"""

from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    AdapterExecutionError,
    AdapterTransactionError,
    ConnectionConfig,
    DatabaseAdapter,
)
from .postgres import PostgresAdapter
from .sqlite import SQLiteAdapter

ADAPTERS = {
    "sqlite": SQLiteAdapter,
    "postgresql": PostgresAdapter,
    "postgres": PostgresAdapter,
}


def create_adapter(config: ConnectionConfig) -> DatabaseAdapter:
    """
    Instantiate and connect the adapter matching the DSN scheme of ``config``.
    """

    adapter_cls = ADAPTERS.get(config.scheme)
    if adapter_cls is None:
        raise AdapterConfigurationError(
            f"No adapter available for scheme {config.scheme!r} ({config.redacted_dsn()})"
        )
    adapter = adapter_cls()
    adapter.connect(config)
    return adapter


__all__ = [
    "ADAPTERS",
    "ConnectionConfig",
    "DatabaseAdapter",
    "AdapterError",
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "AdapterExecutionError",
    "AdapterTransactionError",
    "SQLiteAdapter",
    "PostgresAdapter",
    "create_adapter",
]
