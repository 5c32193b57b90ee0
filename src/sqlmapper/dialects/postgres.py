"""
PostgreSQL dialect.
"""

from __future__ import annotations

from .base import DialectCapabilities, QuotedDialect


class PostgresDialect(QuotedDialect):
    """
    psycopg ``%s`` placeholders; inserts read their generated id back with
    ``RETURNING``.
    """

    name = "postgresql"
    param_style = "format"
    placeholder = "%s"
    capabilities = DialectCapabilities(supports_returning=True)
