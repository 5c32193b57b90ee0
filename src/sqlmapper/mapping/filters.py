"""
Entity filters run by mappers before inserts and updates.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Protocol

from ..errors import MappingError, ValidationError
from .accessors import AttributeAccessor, FieldAccessor


class EntityFilter(Protocol):
    def for_insert(self, entity: Any) -> None: ...

    def for_update(self, entity: Any) -> None: ...


class NullFilter:
    def for_insert(self, entity: Any) -> None:
        return None

    def for_update(self, entity: Any) -> None:
        return None


class RequiredFieldsFilter:
    """
    Rejects entities whose required fields are missing or ``None``.
    """

    def __init__(self, fields: Iterable[str], accessor: FieldAccessor | None = None) -> None:
        self.fields = tuple(fields)
        self.accessor = accessor or AttributeAccessor()

    def for_insert(self, entity: Any) -> None:
        self._check(entity)

    def for_update(self, entity: Any) -> None:
        self._check(entity)

    def _check(self, entity: Any) -> None:
        errors: Dict[str, List[str]] = {}
        for field in self.fields:
            try:
                value = self.accessor.get(entity, field)
            except MappingError:
                value = None
            if value is None:
                errors.setdefault(field, []).append("This field cannot be null.")
        if errors:
            raise ValidationError(errors)
