"""
sqlmapper public package initialization.

Table gateways and entity mappers, plus a unit of work that writes batches
of inserts, updates and deletes inside one transaction per connection.
"""

from .adapters import ConnectionConfig, PostgresAdapter, SQLiteAdapter  # noqa: F401
from .config import UnitOfWorkConfig  # noqa: F401
from .connections import ConnectionLocator  # noqa: F401
from .errors import (  # noqa: F401
    MappingError,
    NoSuchConnection,
    NoSuchMapper,
    SqlMapperError,
    StorageError,
    UsageError,
    ValidationError,
)
from .mapping import EntityFactory, Gateway, Mapper, MapperLocator, Record  # noqa: F401
from .persistence import Transaction, UnitOfWork  # noqa: F401

__all__ = [
    "ConnectionConfig",
    "ConnectionLocator",
    "EntityFactory",
    "Gateway",
    "Mapper",
    "MapperLocator",
    "MappingError",
    "NoSuchConnection",
    "NoSuchMapper",
    "PostgresAdapter",
    "Record",
    "SQLiteAdapter",
    "SqlMapperError",
    "StorageError",
    "Transaction",
    "UnitOfWork",
    "UnitOfWorkConfig",
    "UsageError",
    "ValidationError",
]
