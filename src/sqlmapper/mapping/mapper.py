"""
Entity mapper translating between entity fields and table columns.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..adapters.base import DatabaseAdapter
from ..errors import MappingError
from ..query import Select
from ..utils import get_logger
from .accessors import AttributeAccessor, FieldAccessor
from .changes import row_data
from .factory import EntityFactory
from .filters import EntityFilter, NullFilter
from .gateway import Gateway


class Mapper:
    """
    Maps entities onto the table of a :class:`Gateway`.

    ``columns`` is the ordered ``column -> field`` map; declare it on a
    subclass or pass it to the constructor. The field mapped to the gateway's
    primary column is the entity's identity field.
    """

    columns: Mapping[str, str] = {}

    def __init__(
        self,
        gateway: Gateway,
        *,
        columns: Optional[Mapping[str, str]] = None,
        entity_factory: Optional[EntityFactory] = None,
        entity_filter: Optional[EntityFilter] = None,
        accessor: Optional[FieldAccessor] = None,
    ) -> None:
        self.gateway = gateway
        if columns is not None:
            self.columns = dict(columns)
        self.entity_factory = entity_factory or EntityFactory()
        self.entity_filter = entity_filter or NullFilter()
        self.accessor = accessor or AttributeAccessor()
        self.logger = get_logger("mapping.mapper")

    # ------------------------------------------------------------------ #
    # Table identity
    # ------------------------------------------------------------------ #
    def get_table(self) -> str:
        return self.gateway.get_table()

    def get_primary_column(self) -> str:
        return self.gateway.get_primary_column()

    def get_column_field_map(self) -> Dict[str, str]:
        if not self.columns:
            raise MappingError(f"{type(self).__name__} declares no columns.")
        return dict(self.columns)

    def get_fields(self) -> List[str]:
        return list(self.get_column_field_map().values())

    def get_field_for_column(self, column: str) -> str:
        try:
            return self.get_column_field_map()[column]
        except KeyError:
            raise MappingError(f"Column {column!r} is not mapped by {type(self).__name__}.") from None

    def get_column_for_field(self, field: str) -> str:
        for column, mapped in self.get_column_field_map().items():
            if mapped == field:
                return column
        raise MappingError(f"Field {field!r} is not mapped by {type(self).__name__}.")

    def get_identity_field(self) -> str:
        primary = self.get_primary_column()
        return self.get_column_field_map().get(primary, primary)

    def get_identity_value(self, entity: Any) -> Any:
        return self.accessor.get(entity, self.get_identity_field())

    def set_identity_value(self, entity: Any, value: Any) -> None:
        self.accessor.set(entity, self.get_identity_field(), value)

    def get_read_connection(self) -> DatabaseAdapter:
        return self.gateway.get_read_connection()

    def get_write_connection(self) -> DatabaseAdapter:
        return self.gateway.get_write_connection()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def select(self) -> Select:
        return self.gateway.select(self._columns_as_fields())

    def select_by(self, column: str, value: Any) -> Select:
        if column not in self.get_column_field_map():
            raise MappingError(f"Column {column!r} is not mapped by {type(self).__name__}.")
        return self.gateway.select_by(column, value, self._columns_as_fields())

    def fetch_entity(self, select: Select) -> Any:
        row = self.gateway.fetch_row(select)
        if row is None:
            return None
        return self.new_entity(row)

    def fetch_entity_by(self, column: str, value: Any) -> Any:
        return self.fetch_entity(self.select_by(column, value))

    def fetch_collection(self, select: Select) -> List[Any]:
        return self.new_collection(self.gateway.fetch_rows(select))

    def fetch_collection_by(self, column: str, value: Any) -> List[Any]:
        return self.fetch_collection(self.select_by(column, value))

    def new_entity(self, row: Optional[Mapping[str, Any]] = None) -> Any:
        return self.entity_factory.new_entity(row)

    def new_collection(self, rows: List[Mapping[str, Any]]) -> List[Any]:
        return self.entity_factory.new_collection(rows)

    def snapshot(self, entity: Any) -> Dict[str, Any]:
        """
        Capture the mapped field values of ``entity`` for later diffing.
        """
        return {field: self.accessor.get(entity, field) for field in self.get_column_field_map().values()}

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def insert(self, entity: Any) -> int:
        self.entity_filter.for_insert(entity)
        data = row_data(entity, self.get_column_field_map(), self.accessor)
        result = self.gateway.insert(data)
        if result and self.gateway.is_auto_primary():
            self.set_identity_value(entity, self.gateway.get_primary_value(result.row))
        return result.affected

    def update(self, entity: Any, baseline: Optional[Mapping[str, Any]] = None) -> int:
        self.entity_filter.for_update(entity)
        self._require_identity(entity, "update")
        data = row_data(
            entity,
            self.get_column_field_map(),
            self.accessor,
            baseline=baseline,
            primary_column=self.get_primary_column(),
        )
        return self.gateway.update(data).affected

    def delete(self, entity: Any) -> int:
        primary_value = self._require_identity(entity, "delete")
        return self.gateway.delete({self.get_primary_column(): primary_value}).affected

    # ------------------------------------------------------------------ #
    def _columns_as_fields(self) -> List[tuple[str, str]]:
        return list(self.get_column_field_map().items())

    def _require_identity(self, entity: Any, action: str) -> Any:
        value = self.get_identity_value(entity)
        if value is None:
            raise MappingError(f"Cannot {action} {type(entity).__name__} without an identity value.")
        return value
