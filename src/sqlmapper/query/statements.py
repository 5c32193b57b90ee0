"""
SQL statements bound to an adapter.

Each statement collects its clauses, renders them with the adapter's dialect
in :meth:`compile`, and executes through the same adapter.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..adapters.base import DatabaseAdapter
from ..dialects.base import Dialect
from ..errors import UsageError


def row_to_dict(cursor: Any, row: Any) -> Dict[str, Any]:
    if hasattr(row, "keys"):
        return {key: row[key] for key in row.keys()}
    names = [column[0] for column in cursor.description]
    return dict(zip(names, row))


class Statement:
    def __init__(self, adapter: DatabaseAdapter) -> None:
        self.adapter = adapter
        self.dialect: Dialect = adapter.dialect
        self._table: Optional[str] = None

    def compile(self) -> Tuple[str, List[Any]]:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.compile()[0]

    def _require_table(self) -> str:
        if not self._table:
            raise UsageError(f"{type(self).__name__} has no table.")
        return self.dialect.format_table(self._table)

    def _execute(self):
        sql, params = self.compile()
        return self.adapter.execute(sql, params)


class _Filtered(Statement):
    def __init__(self, adapter: DatabaseAdapter) -> None:
        super().__init__(adapter)
        self._where: List[Tuple[str, List[Any]]] = []

    def where(self, condition: str, *params: Any):
        """
        Add a raw condition; placeholders must use the dialect's style.
        """
        self._where.append((condition, list(params)))
        return self

    def where_equals(self, column: str, value: Any):
        column_sql = self.qualify(column)
        if value is None:
            return self.where(f"{column_sql} IS NULL")
        return self.where(f"{column_sql} = {self.dialect.parameter_placeholder()}", value)

    def where_in(self, column: str, values: Iterable[Any]):
        values = list(values)
        if not values:
            return self.where("1 = 0")
        return self.where(f"{self.qualify(column)} IN ({self.dialect.placeholders(len(values))})", *values)

    def qualify(self, column: str) -> str:
        return self.dialect.quote_identifier(column)

    def _compile_where(self, parts: List[str], params: List[Any]) -> None:
        if not self._where:
            return
        parts.append("WHERE")
        parts.append(" AND ".join(f"({condition})" for condition, _ in self._where))
        for _, condition_params in self._where:
            params.extend(condition_params)


class Select(_Filtered):
    def __init__(self, adapter: DatabaseAdapter) -> None:
        super().__init__(adapter)
        self._columns: List[Tuple[str, Optional[str]]] = []
        self._order_by: List[str] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    def from_(self, table: str) -> "Select":
        self._table = table
        return self

    def columns(self, *columns: str | Tuple[str, Optional[str]]) -> "Select":
        """
        Add columns as names or ``(column, alias)`` pairs.
        """
        for column in columns:
            if isinstance(column, tuple):
                self._columns.append(column)
            else:
                self._columns.append((column, None))
        return self

    def order_by(self, *columns: str) -> "Select":
        self._order_by.extend(columns)
        return self

    def limit(self, limit: Optional[int]) -> "Select":
        self._limit = limit
        return self

    def offset(self, offset: Optional[int]) -> "Select":
        self._offset = offset
        return self

    def qualify(self, column: str) -> str:
        if self._table:
            return f"{self.dialect.format_table(self._table)}.{self.dialect.quote_identifier(column)}"
        return self.dialect.quote_identifier(column)

    def compile(self) -> Tuple[str, List[Any]]:
        table = self._require_table()
        if self._columns:
            select_list = ", ".join(self._compile_column(column, alias) for column, alias in self._columns)
        else:
            select_list = f"{table}.*"
        parts: List[str] = [f"SELECT {select_list}", "FROM", table]
        params: List[Any] = []
        self._compile_where(parts, params)
        if self._order_by:
            parts.append("ORDER BY")
            parts.append(", ".join(self._compile_ordering(column) for column in self._order_by))
        limit_clause = self.dialect.limit_clause(self._limit, self._offset)
        if limit_clause:
            parts.append(limit_clause)
        return " ".join(parts), params

    def fetch_one(self) -> Optional[Dict[str, Any]]:
        cursor = self._execute()
        row = cursor.fetchone()
        if row is None:
            return None
        return row_to_dict(cursor, row)

    def fetch_all(self) -> List[Dict[str, Any]]:
        cursor = self._execute()
        return [row_to_dict(cursor, row) for row in cursor.fetchall()]

    def fetch_column(self) -> List[Any]:
        return [row[0] for row in self._execute().fetchall()]

    def fetch_pairs(self) -> Dict[Any, Any]:
        """
        Map the first selected column onto the second.
        """
        return {row[0]: row[1] for row in self._execute().fetchall()}

    def fetch_value(self) -> Any:
        row = self._execute().fetchone()
        return None if row is None else row[0]

    def _compile_column(self, column: str, alias: Optional[str]) -> str:
        sql = self.qualify(column)
        if alias and alias != column:
            sql += f" AS {self.dialect.quote_identifier(alias)}"
        return sql

    def _compile_ordering(self, column: str) -> str:
        descending = column.startswith("-")
        name = column[1:] if descending else column
        return self.qualify(name) + (" DESC" if descending else "")


class Insert(Statement):
    def __init__(self, adapter: DatabaseAdapter) -> None:
        super().__init__(adapter)
        self._values: Dict[str, Any] = {}
        self._returning: Optional[str] = None
        self._cursor: Any = None

    def into(self, table: str) -> "Insert":
        self._table = table
        return self

    def values(self, values: Mapping[str, Any]) -> "Insert":
        self._values.update(values)
        return self

    def returning(self, column: Optional[str]) -> "Insert":
        self._returning = column
        return self

    def compile(self) -> Tuple[str, List[Any]]:
        table = self._require_table()
        if self._values:
            columns = self.dialect.quote_columns(self._values)
            sql = f"INSERT INTO {table} ({columns}) VALUES ({self.dialect.placeholders(len(self._values))})"
        else:
            sql = f"INSERT INTO {table} DEFAULT VALUES"
        sql += self.dialect.returning_clause(self._returning)
        return sql, list(self._values.values())

    def perform(self) -> int:
        self._cursor = self._execute()
        return max(self._cursor.rowcount, 0)

    def fetch_id(self, column: str) -> Any:
        if self._cursor is None:
            raise UsageError("Insert.fetch_id() called before perform().")
        return self.adapter.last_insert_id(self._cursor, self._table, column)


class Update(_Filtered):
    def __init__(self, adapter: DatabaseAdapter) -> None:
        super().__init__(adapter)
        self._set: Dict[str, Any] = {}

    def table(self, table: str) -> "Update":
        self._table = table
        return self

    def set(self, values: Mapping[str, Any]) -> "Update":
        self._set.update(values)
        return self

    def compile(self) -> Tuple[str, List[Any]]:
        table = self._require_table()
        if not self._set:
            raise UsageError("Update has no columns to set.")
        placeholder = self.dialect.parameter_placeholder()
        assignments = ", ".join(
            f"{self.dialect.quote_identifier(column)} = {placeholder}" for column in self._set
        )
        parts = [f"UPDATE {table} SET {assignments}"]
        params: List[Any] = list(self._set.values())
        self._compile_where(parts, params)
        return " ".join(parts), params

    def perform(self) -> int:
        return max(self._execute().rowcount, 0)


class Delete(_Filtered):
    def from_(self, table: str) -> "Delete":
        self._table = table
        return self

    def compile(self) -> Tuple[str, List[Any]]:
        parts = [f"DELETE FROM {self._require_table()}"]
        params: List[Any] = []
        self._compile_where(parts, params)
        return " ".join(parts), params

    def perform(self) -> int:
        return max(self._execute().rowcount, 0)


class QueryFactory:
    """
    Creates statements bound to one adapter.
    """

    def __init__(self, adapter: DatabaseAdapter) -> None:
        self.adapter = adapter

    def new_select(self) -> Select:
        return Select(self.adapter)

    def new_insert(self) -> Insert:
        return Insert(self.adapter)

    def new_update(self) -> Update:
        return Update(self.adapter)

    def new_delete(self) -> Delete:
        return Delete(self.adapter)


def is_sequence_value(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset)) or (
        isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))
    )
