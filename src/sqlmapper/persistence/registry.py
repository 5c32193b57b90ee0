"""
Registry of pending operations, one per entity.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..errors import UsageError


class OperationKind(str, enum.Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def coerce(cls, value: "OperationKind | str") -> "OperationKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UsageError(f"Unknown operation kind {value!r}") from None


@dataclass(frozen=True)
class PendingOperation:
    entity: Any
    kind: OperationKind
    mapper_name: str
    baseline: Optional[Mapping[str, Any]] = None


class EntityRegistry:
    """
    Pending operations keyed by entity identity, in the order of their latest attach.

    The handle of an entity is ``id(entity)``. It stays unique for as long as
    the entity is registered because the stored operation holds a reference
    to it. Entities that compare equal by value are still tracked separately.
    """

    def __init__(self) -> None:
        self._operations: Dict[int, PendingOperation] = {}

    def attach(
        self,
        entity: Any,
        kind: OperationKind | str,
        mapper_name: str,
        baseline: Optional[Mapping[str, Any]] = None,
    ) -> PendingOperation:
        """
        Record ``kind`` for ``entity``, replacing any operation already held.

        The entity is detached first, so a replaced entity moves to the end
        of the replay order.
        """
        kind = OperationKind.coerce(kind)
        if baseline is not None:
            if kind is not OperationKind.UPDATE:
                raise UsageError(f"A baseline is only accepted for updates, not {kind.value}s.")
            baseline = MappingProxyType(dict(baseline))
        operation = PendingOperation(entity, kind, mapper_name, baseline)
        self.detach(entity)
        self._operations[id(entity)] = operation
        return operation

    def detach(self, entity: Any) -> None:
        self._operations.pop(id(entity), None)

    def get(self, entity: Any) -> Optional[PendingOperation]:
        return self._operations.get(id(entity))

    def items(self) -> List[Tuple[Any, PendingOperation]]:
        return [(operation.entity, operation) for operation in self._operations.values()]

    def operations(self) -> List[PendingOperation]:
        return list(self._operations.values())

    def mapper_names(self) -> List[str]:
        return list(dict.fromkeys(operation.mapper_name for operation in self._operations.values()))

    def clear(self) -> None:
        self._operations.clear()

    def __iter__(self) -> Iterator[Tuple[Any, PendingOperation]]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, entity: Any) -> bool:
        return id(entity) in self._operations
