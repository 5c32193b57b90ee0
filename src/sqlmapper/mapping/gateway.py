"""
Row data gateway to a single table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type

from ..adapters.base import DatabaseAdapter
from ..connections import ConnectionLocator
from ..errors import MappingError, UsageError
from ..query import QueryFactory, Select, is_sequence_value
from ..utils import get_logger


@dataclass(frozen=True)
class WriteResult:
    """
    Affected row count of a write and the row as it was written.
    """

    affected: int
    row: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.affected > 0


class Gateway:
    """
    Issues reads through the read connection and writes through the write
    connection of a :class:`ConnectionLocator`.

    Subclasses usually pin ``table`` and ``primary_column`` as class
    attributes; both can also be passed to the constructor.
    """

    table: Optional[str] = None
    primary_column: Optional[str] = None
    auto_primary: bool = True

    def __init__(
        self,
        connection_locator: ConnectionLocator,
        *,
        table: Optional[str] = None,
        primary_column: Optional[str] = None,
        auto_primary: Optional[bool] = None,
        query_factory_cls: Type[QueryFactory] = QueryFactory,
    ) -> None:
        self.connection_locator = connection_locator
        self.query_factory_cls = query_factory_cls
        if table is not None:
            self.table = table
        if primary_column is not None:
            self.primary_column = primary_column
        if auto_primary is not None:
            self.auto_primary = auto_primary
        if not self.table or not self.primary_column:
            raise UsageError(f"{type(self).__name__} requires a table and a primary column.")
        self._read_connection: DatabaseAdapter | None = None
        self._write_connection: DatabaseAdapter | None = None
        self.logger = get_logger("mapping.gateway")

    # ------------------------------------------------------------------ #
    def get_table(self) -> str:
        return self.table

    def get_primary_column(self) -> str:
        return self.primary_column

    def is_auto_primary(self) -> bool:
        """
        Whether the database assigns the primary key on insert.
        """
        return self.auto_primary

    def get_read_connection(self) -> DatabaseAdapter:
        if self._read_connection is None:
            self._read_connection = self.connection_locator.get_read()
        return self._read_connection

    def get_write_connection(self) -> DatabaseAdapter:
        if self._write_connection is None:
            self._write_connection = self.connection_locator.get_write()
        return self._write_connection

    def get_primary_value(self, row: Mapping[str, Any]) -> Any:
        try:
            return row[self.primary_column]
        except KeyError as exc:
            raise MappingError(f"Row for {self.table!r} lacks primary column {self.primary_column!r}") from exc

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def select(self, columns: Sequence[Any] = ()) -> Select:
        select = self.query_factory_cls(self.get_read_connection()).new_select()
        return select.from_(self.table).columns(*columns)

    def select_by(self, column: str, value: Any, columns: Sequence[Any] = ()) -> Select:
        """
        Select rows where ``column`` equals ``value``, or is in ``value`` when
        a sequence is given.
        """
        select = self.select(columns)
        if is_sequence_value(value):
            return select.where_in(column, value)
        return select.where_equals(column, value)

    def fetch_row(self, select: Select) -> Optional[Dict[str, Any]]:
        return select.fetch_one()

    def fetch_row_by(self, column: str, value: Any, columns: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        return self.select_by(column, value, columns).fetch_one()

    def fetch_rows(self, select: Select) -> List[Dict[str, Any]]:
        return select.fetch_all()

    def fetch_rows_by(self, column: str, value: Any, columns: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        return self.select_by(column, value, columns).fetch_all()

    def fetch_column(self, select: Select) -> List[Any]:
        return select.fetch_column()

    def fetch_pairs(self, select: Select) -> Dict[Any, Any]:
        return select.fetch_pairs()

    def fetch_value(self, select: Select) -> Any:
        return select.fetch_value()

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def insert(self, row: Mapping[str, Any]) -> WriteResult:
        row = dict(row)
        if self.auto_primary:
            row.pop(self.primary_column, None)
        insert = self._query_factory().new_insert().into(self.table).values(row)
        if self.auto_primary:
            insert.returning(self.primary_column)
        affected = insert.perform()
        if not affected:
            return WriteResult(0, row)
        if self.auto_primary:
            row[self.primary_column] = insert.fetch_id(self.primary_column)
        return WriteResult(affected, row)

    def update(self, row: Mapping[str, Any]) -> WriteResult:
        row = dict(row)
        primary_value = self.get_primary_value(row)
        changes = {column: value for column, value in row.items() if column != self.primary_column}
        if not changes:
            self.logger.debug("Skipping update of %s %s=%r: nothing changed", self.table, self.primary_column, primary_value)
            return WriteResult(0, row)
        update = self._query_factory().new_update().table(self.table).set(changes)
        update.where_equals(self.primary_column, primary_value)
        return WriteResult(update.perform(), row)

    def delete(self, row: Mapping[str, Any]) -> WriteResult:
        primary_value = self.get_primary_value(row)
        delete = self._query_factory().new_delete().from_(self.table)
        delete.where_equals(self.primary_column, primary_value)
        return WriteResult(delete.perform(), dict(row))

    def _query_factory(self) -> QueryFactory:
        return self.query_factory_cls(self.get_write_connection())
