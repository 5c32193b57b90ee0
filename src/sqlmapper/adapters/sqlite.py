"""
SQLite database adapter implementation.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any, Sequence

from ..config import resolve_slow_query_ms
from ..dialects.sqlite import SQLiteDialect
from ..utils import get_logger, redact_params, time_call
from .base import (
    AdapterConnectionError,
    AdapterExecutionError,
    AdapterTransactionError,
    ConnectionConfig,
    DatabaseAdapter,
)

_BEGIN_MODES = {"DEFERRED", "IMMEDIATE", "EXCLUSIVE"}


@dataclass(slots=True)
class SQLiteConnectionState:
    connection: sqlite3.Connection
    begin_sql: str


class SQLiteAdapter(DatabaseAdapter):
    """
    Adapter wrapping the stdlib sqlite3 module.

    The driver is opened in autocommit mode; transactions exist only between
    explicit :meth:`begin` and :meth:`commit`/:meth:`rollback` calls.
    """

    def __init__(self, slow_query_ms: int | None = None) -> None:
        self.dialect = SQLiteDialect()
        self._state: SQLiteConnectionState | None = None
        self.logger = get_logger("adapters.sqlite")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        path = self._normalize_path(config.url)
        timeout = config.timeout if config.timeout is not None else 5.0
        try:
            connection = sqlite3.connect(
                path,
                isolation_level=None,
                timeout=timeout,
                check_same_thread=False,
            )
        except sqlite3.Error as exc:
            raise AdapterConnectionError(f"Failed to open SQLite database {path!r}.") from exc
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")

        mode = (config.isolation_level or "DEFERRED").upper()
        if mode not in _BEGIN_MODES:
            connection.close()
            raise AdapterConnectionError(f"Unsupported SQLite isolation level {config.isolation_level!r}.")
        self._state = SQLiteConnectionState(connection, f"BEGIN {mode}")
        self.logger.debug("Opened SQLite database %s", path)
        return connection

    def close(self) -> None:
        if self._state:
            self._state.connection.close()
            self._state = None

    @property
    def in_transaction(self) -> bool:
        return bool(self._state and self._state.connection.in_transaction)

    def _ensure_connection(self) -> sqlite3.Connection:
        if not self._state:
            raise AdapterConnectionError("SQLiteAdapter is not connected.")
        return self._state.connection

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def execute(self, sql: str, params: Sequence[Any] | None = None) -> sqlite3.Cursor:
        connection = self._ensure_connection()
        params = tuple(params or ())
        cursor = connection.cursor()
        with time_call(
            "sqlite.execute",
            self.logger,
            sql=sql,
            params=redact_params(params),
            threshold_ms=self.slow_query_ms,
        ):
            try:
                cursor.execute(sql, params)
            except sqlite3.Error as exc:
                raise AdapterExecutionError(str(exc)) from exc
        return cursor

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    def begin(self) -> None:
        connection = self._ensure_connection()
        try:
            connection.execute(self._state.begin_sql)
        except sqlite3.Error as exc:
            raise AdapterTransactionError(f"Could not begin transaction: {exc}") from exc

    def commit(self) -> None:
        connection = self._ensure_connection()
        try:
            connection.commit()
        except sqlite3.Error as exc:
            raise AdapterTransactionError(f"Could not commit transaction: {exc}") from exc

    def rollback(self) -> None:
        connection = self._ensure_connection()
        try:
            connection.rollback()
        except sqlite3.Error as exc:
            raise AdapterTransactionError(f"Could not roll back transaction: {exc}") from exc

    # ------------------------------------------------------------------ #
    def last_insert_id(self, cursor: sqlite3.Cursor, table: str, pk_column: str) -> Any:
        return cursor.lastrowid

    @staticmethod
    def _normalize_path(url: str) -> str:
        # query parameters were already folded into the config
        url = url.split("?", 1)[0]
        if url in ("sqlite:///:memory:", "sqlite://", ":memory:"):
            return ":memory:"
        prefix = "sqlite:///"
        if url.startswith(prefix):
            return url[len(prefix) :]
        return url
