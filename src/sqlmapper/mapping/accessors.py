"""
Field accessors used by mappers to read and write entity fields.
"""

from __future__ import annotations

from typing import Any, MutableMapping, Protocol

from ..errors import MappingError


class FieldAccessor(Protocol):
    def get(self, entity: Any, field: str) -> Any: ...

    def set(self, entity: Any, field: str, value: Any) -> None: ...


class AttributeAccessor:
    """
    Reads and writes entity attributes.
    """

    def get(self, entity: Any, field: str) -> Any:
        try:
            return getattr(entity, field)
        except AttributeError as exc:
            raise MappingError(f"{type(entity).__name__} has no field {field!r}") from exc

    def set(self, entity: Any, field: str, value: Any) -> None:
        try:
            setattr(entity, field, value)
        except AttributeError as exc:
            raise MappingError(f"Cannot set field {field!r} on {type(entity).__name__}") from exc


class MappingAccessor:
    """
    Reads and writes keys of dict-like entities.
    """

    def get(self, entity: MutableMapping[str, Any], field: str) -> Any:
        try:
            return entity[field]
        except KeyError as exc:
            raise MappingError(f"Entity has no field {field!r}") from exc

    def set(self, entity: MutableMapping[str, Any], field: str, value: Any) -> None:
        entity[field] = value
