"""
PostgreSQL database adapter implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..config import resolve_slow_query_ms
from ..dialects.postgres import PostgresDialect
from ..utils import get_logger, redact_params, time_call
from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterExecutionError,
    AdapterTransactionError,
    ConnectionConfig,
    DatabaseAdapter,
)


def _load_driver():
    try:
        import psycopg

        return psycopg
    except ImportError:
        return None


@dataclass
class PostgresConnectionState:
    connection: Any
    config: ConnectionConfig
    driver: Any


class PostgresAdapter(DatabaseAdapter):
    """
    Adapter wrapping the psycopg PostgreSQL driver.

    The driver connection runs in autocommit mode and transaction boundaries
    are issued as explicit ``BEGIN``/``COMMIT``/``ROLLBACK`` statements, so a
    unit of work controls exactly when a transaction is open.
    """

    def __init__(self, slow_query_ms: int | None = None) -> None:
        self.dialect = PostgresDialect()
        self._state: PostgresConnectionState | None = None
        self._in_transaction = False
        self.logger = get_logger("adapters.postgres")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    def connect(self, config: ConnectionConfig) -> Any:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError("psycopg is required to use PostgresAdapter.")

        options = dict(config.options or {})
        if config.timeout and "connect_timeout" not in options:
            options["connect_timeout"] = int(config.timeout)

        self.logger.info("Connecting to PostgreSQL %s", config.descriptive_label())
        try:
            connection = driver.connect(config.url, **options)
        except Exception as exc:
            raise AdapterConnectionError("Failed to connect to PostgreSQL.") from exc
        connection.autocommit = True

        self._state = PostgresConnectionState(connection, config, driver)
        self._in_transaction = False
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self):
        if not self._state:
            raise AdapterConnectionError("PostgresAdapter is not connected.")
        conn = self._state.connection
        if getattr(conn, "closed", False):
            if self._in_transaction:
                raise AdapterConnectionError("PostgreSQL connection lost inside an open transaction.")
            self.logger.warning("PostgreSQL connection closed; reconnecting.")
            conn = self.connect(self._state.config)
        return conn

    def execute(self, sql: str, params: Sequence[Any] | None = None):
        connection = self._ensure_connection()
        params = tuple(params or ())
        self._validate_params(sql, params)
        cursor = connection.cursor()
        with time_call(
            "postgres.execute",
            self.logger,
            sql=sql,
            params=redact_params(params),
            threshold_ms=self.slow_query_ms,
        ):
            try:
                cursor.execute(sql, params)
            except self._driver_error() as exc:
                raise AdapterExecutionError(str(exc)) from exc
        return cursor

    def begin(self) -> None:
        statement = "BEGIN"
        if self._state and self._state.config.isolation_level:
            statement += f" ISOLATION LEVEL {self._state.config.isolation_level.upper()}"
        self._control(statement)
        self._in_transaction = True

    def commit(self) -> None:
        self._control("COMMIT")
        self._in_transaction = False

    def rollback(self) -> None:
        try:
            self._control("ROLLBACK")
        finally:
            self._in_transaction = False

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def last_insert_id(self, cursor: Any, table: str, pk_column: str) -> Any:
        row = cursor.fetchone()
        if not row:
            raise AdapterExecutionError(f"No RETURNING data available for {table}.{pk_column}.")
        return row[0]

    # ------------------------------------------------------------------ #
    def _control(self, statement: str) -> None:
        connection = self._ensure_connection()
        try:
            connection.cursor().execute(statement)
        except self._driver_error() as exc:
            raise AdapterTransactionError(f"{statement} failed: {exc}") from exc
        self.logger.debug("postgres %s", statement)

    def _driver_error(self) -> type[Exception]:
        driver = self._state.driver if self._state else None
        return getattr(driver, "Error", Exception)

    @staticmethod
    def _count_placeholders(sql: str) -> int:
        count = 0
        idx = 0
        while idx < len(sql) - 1:
            pair = sql[idx : idx + 2]
            if pair == "%s":
                count += 1
                idx += 2
            elif pair == "%%":
                idx += 2
            else:
                idx += 1
        return count

    def _validate_params(self, sql: str, params: Sequence[Any]) -> None:
        expected = self._count_placeholders(sql)
        if expected != len(params):
            raise AdapterExecutionError(
                f"Parameter count mismatch: expected {expected}, received {len(params)}."
            )
