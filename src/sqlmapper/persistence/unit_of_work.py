"""
Unit of Work batching inserts, updates and deletes across mappers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from ..adapters.base import DatabaseAdapter
from ..config import UnitOfWorkConfig
from ..errors import NoSuchMapper, UsageError
from ..mapping.locator import MapperLocator
from ..mapping.mapper import Mapper
from ..utils import get_logger, time_call
from .collector import ConnectionCollector
from .coordinator import TransactionCoordinator, TransactionState
from .registry import EntityRegistry, OperationKind, PendingOperation


class OutcomeSet:
    """
    Entities handled by one kind of operation, keyed by identity, with the
    details recorded for each (``affected`` rows, and ``identity`` for inserts).
    """

    def __init__(self) -> None:
        self._entries: Dict[int, Tuple[Any, Dict[str, Any]]] = {}

    def add(self, entity: Any, **info: Any) -> None:
        self._entries[id(entity)] = (entity, info)

    def info(self, entity: Any) -> Dict[str, Any]:
        try:
            return dict(self._entries[id(entity)][1])
        except KeyError:
            raise KeyError(f"{entity!r} is not part of this outcome") from None

    def entities(self) -> List[Any]:
        return [entity for entity, _ in self._entries.values()]

    def __contains__(self, entity: Any) -> bool:
        return id(entity) in self._entries

    def __iter__(self) -> Iterator[Any]:
        return iter(self.entities())

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class ExecutionOutcome:
    inserted: OutcomeSet = field(default_factory=OutcomeSet)
    updated: OutcomeSet = field(default_factory=OutcomeSet)
    deleted: OutcomeSet = field(default_factory=OutcomeSet)
    failed_entity: Any = None
    exception: Optional[Exception] = None
    rollback_errors: List[Tuple[DatabaseAdapter, Exception]] = field(default_factory=list)
    partially_committed: bool = False

    @property
    def succeeded(self) -> bool:
        return self.exception is None


class UnitOfWork:
    """
    Collects pending operations and executes them in one multi-connection
    transaction.

    Each entity holds at most one pending operation; registering another one
    replaces it. :meth:`exec` replays the operations in registration order,
    stops at the first error, rolls back every connection and reports the
    failure through :meth:`get_failed_entity` and :meth:`get_failure_error`
    instead of raising.
    """

    def __init__(self, mapper_locator: MapperLocator, *, config: Optional[UnitOfWorkConfig] = None) -> None:
        self.mappers = mapper_locator
        self.config = config or UnitOfWorkConfig()
        self.registry = EntityRegistry()
        self.collector = ConnectionCollector(mapper_locator)
        self.outcome = ExecutionOutcome()
        self._connections: List[DatabaseAdapter] = []
        self._executing = False
        self._handlers: Dict[OperationKind, Callable[[Mapper, PendingOperation], None]] = {
            OperationKind.INSERT: self._exec_insert,
            OperationKind.UPDATE: self._exec_update,
            OperationKind.DELETE: self._exec_delete,
        }
        self.logger = get_logger("persistence.unit_of_work")

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #
    def insert(self, mapper_name: str, entity: Any) -> None:
        self._attach(entity, OperationKind.INSERT, mapper_name)

    def update(self, mapper_name: str, entity: Any, baseline: Optional[Mapping[str, Any]] = None) -> None:
        """
        Register ``entity`` for update; with a ``baseline`` only changed
        columns are written.
        """
        self._attach(entity, OperationKind.UPDATE, mapper_name, baseline)

    def delete(self, mapper_name: str, entity: Any) -> None:
        self._attach(entity, OperationKind.DELETE, mapper_name)

    def detach(self, entity: Any) -> None:
        self.registry.detach(entity)

    def get_entities(self) -> EntityRegistry:
        return self.registry

    def _attach(
        self,
        entity: Any,
        kind: OperationKind,
        mapper_name: str,
        baseline: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if mapper_name not in self.mappers:
            raise NoSuchMapper(mapper_name)
        self.registry.attach(entity, kind, mapper_name, baseline)

    # ------------------------------------------------------------------ #
    # Connections
    # ------------------------------------------------------------------ #
    def load_connections(self) -> List[DatabaseAdapter]:
        self._connections = self.collector.collect(self.registry)
        return self._connections

    def get_connections(self) -> List[DatabaseAdapter]:
        return list(self._connections)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def exec(self) -> bool:
        """
        Execute every pending operation; ``True`` when the batch committed.
        """
        if self._executing:
            raise UsageError("exec() is already running on this unit of work.")
        self._executing = True
        try:
            return self._exec()
        finally:
            self._executing = False

    def _exec(self) -> bool:
        self.outcome = ExecutionOutcome()
        operations = self.registry.operations()
        coordinator = TransactionCoordinator()
        self.logger.info("Executing unit of work with %s pending operations", len(operations))

        entity = None
        try:
            self._connections = coordinator.collect(self.collector, self.registry)
            coordinator.begin()
            for operation in operations:
                entity = operation.entity
                self._dispatch(operation)
            entity = None
            coordinator.commit()
        except Exception as exc:
            self.outcome.failed_entity = entity
            self.outcome.exception = exc
            self.logger.warning(
                "Unit of work failed on %r: %s; rolling back %s connections",
                entity,
                exc,
                len(self._connections),
            )
            if coordinator.state is not TransactionState.ROLLED_BACK:
                coordinator.rollback()
            self.outcome.rollback_errors = list(coordinator.rollback_errors)
            self.outcome.partially_committed = coordinator.partially_committed
            return False

        self.logger.info(
            "Unit of work committed: %s inserted, %s updated, %s deleted",
            len(self.outcome.inserted),
            len(self.outcome.updated),
            len(self.outcome.deleted),
        )
        if self.config.clear_on_success:
            self.registry.clear()
        return True

    def _dispatch(self, operation: PendingOperation) -> None:
        handler = self._handlers.get(operation.kind)
        if handler is None:
            raise UsageError(f"No handler for operation kind {operation.kind!r}")
        mapper = self.mappers.get(operation.mapper_name)
        self.logger.debug("Dispatching %s of %r via %r", operation.kind.value, operation.entity, operation.mapper_name)
        with time_call(
            f"unit_of_work.{operation.kind.value}",
            self.logger,
            threshold_ms=self.config.slow_query_ms,
        ):
            handler(mapper, operation)

    def _exec_insert(self, mapper: Mapper, operation: PendingOperation) -> None:
        affected = mapper.insert(operation.entity)
        self.outcome.inserted.add(
            operation.entity,
            affected=affected,
            identity=mapper.get_identity_value(operation.entity),
        )

    def _exec_update(self, mapper: Mapper, operation: PendingOperation) -> None:
        affected = mapper.update(operation.entity, operation.baseline)
        self.outcome.updated.add(operation.entity, affected=affected)

    def _exec_delete(self, mapper: Mapper, operation: PendingOperation) -> None:
        affected = mapper.delete(operation.entity)
        self.outcome.deleted.add(operation.entity, affected=affected)

    # ------------------------------------------------------------------ #
    # Outcome
    # ------------------------------------------------------------------ #
    def get_outcome(self) -> ExecutionOutcome:
        return self.outcome

    def get_inserted(self) -> OutcomeSet:
        return self.outcome.inserted

    def get_updated(self) -> OutcomeSet:
        return self.outcome.updated

    def get_deleted(self) -> OutcomeSet:
        return self.outcome.deleted

    def get_failed_entity(self) -> Any:
        return self.outcome.failed_entity

    def get_failure_error(self) -> Optional[Exception]:
        return self.outcome.exception
