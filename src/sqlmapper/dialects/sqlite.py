"""
SQLite dialect.
"""

from __future__ import annotations

from .base import DialectCapabilities, QuotedDialect


class SQLiteDialect(QuotedDialect):
    """
    qmark placeholders; generated ids come from ``lastrowid``. Attached
    databases are addressed as ``schema.table``.
    """

    name = "sqlite"
    param_style = "qmark"
    placeholder = "?"
    capabilities = DialectCapabilities(supports_returning=False)
    unbounded_limit = "-1"
