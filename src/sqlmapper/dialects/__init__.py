"""
SQL dialects of the supported backends.
"""

from .base import Dialect, DialectCapabilities, QuotedDialect
from .postgres import PostgresDialect
from .sqlite import SQLiteDialect

__all__ = ["Dialect", "DialectCapabilities", "PostgresDialect", "QuotedDialect", "SQLiteDialect"]
