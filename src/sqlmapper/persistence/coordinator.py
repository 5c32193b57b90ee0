"""
Begin/commit/rollback across several connections.

Commits are issued connection by connection. If a later commit fails, the
earlier ones stay committed; only a single physical connection gives an
all-or-nothing batch.
"""

from __future__ import annotations

import enum
from typing import List, Optional, Sequence, Tuple

from ..adapters.base import DatabaseAdapter
from ..errors import TransactionError
from ..utils import get_logger
from .collector import ConnectionCollector
from .registry import EntityRegistry


class TransactionState(enum.Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    BEGAN = "began"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionCoordinator:
    def __init__(self, connections: Optional[Sequence[DatabaseAdapter]] = None) -> None:
        self.connections: List[DatabaseAdapter] = list(connections or [])
        self.state = TransactionState.IDLE
        self._begun: List[DatabaseAdapter] = []
        self._committed: set[int] = set()
        self.rollback_errors: List[Tuple[DatabaseAdapter, Exception]] = []
        self.logger = get_logger("persistence.coordinator")

    def collect(
        self, collector: ConnectionCollector, registry: Optional[EntityRegistry] = None
    ) -> List[DatabaseAdapter]:
        """
        Gather the write connections for ``registry``, or for every mapper
        known to the collector when no registry is given.
        """
        self._require(TransactionState.IDLE, action="collect")
        self.state = TransactionState.COLLECTING
        if registry is None:
            self.connections = collector.collect_all()
        else:
            self.connections = collector.collect(registry)
        return self.connections

    def begin(self) -> None:
        self._require(TransactionState.IDLE, TransactionState.COLLECTING, action="begin")
        for connection in self.connections:
            try:
                connection.begin()
            except Exception:
                self.logger.warning(
                    "Begin failed after %s of %s connections; rolling back",
                    len(self._begun),
                    len(self.connections),
                )
                self.rollback()
                raise
            self._begun.append(connection)
        self.state = TransactionState.BEGAN

    def commit(self) -> None:
        self._require(TransactionState.BEGAN, action="commit")
        for connection in self._begun:
            if id(connection) in self._committed:
                continue
            connection.commit()
            self._committed.add(id(connection))
        self.state = TransactionState.COMMITTED

    def rollback(self) -> List[Tuple[DatabaseAdapter, Exception]]:
        """
        Roll back every begun connection that has not committed yet.

        Every connection is attempted; failures are logged, returned and kept
        on :attr:`rollback_errors`, including those of a failed :meth:`begin`.
        """
        self._require(
            TransactionState.IDLE, TransactionState.COLLECTING, TransactionState.BEGAN, action="roll back"
        )
        failures: List[Tuple[DatabaseAdapter, Exception]] = []
        for connection in self._begun:
            if id(connection) in self._committed:
                continue
            try:
                connection.rollback()
            except Exception as exc:
                self.logger.exception("Rollback failed on %r", connection)
                failures.append((connection, exc))
        if self._committed:
            self.logger.error(
                "Rolled back after %s of %s connections had committed",
                len(self._committed),
                len(self._begun),
            )
        self.state = TransactionState.ROLLED_BACK
        self.rollback_errors = failures
        return failures

    @property
    def partially_committed(self) -> bool:
        return bool(self._committed) and self.state is not TransactionState.COMMITTED

    def _require(self, *states: TransactionState, action: str) -> None:
        if self.state not in states:
            raise TransactionError(f"Cannot {action} while {self.state.value}.")
