"""
Persistence layer: entity registry, transaction coordination, unit of work.
"""

from .collector import ConnectionCollector
from .coordinator import TransactionCoordinator, TransactionState
from .registry import EntityRegistry, OperationKind, PendingOperation
from .transaction import Transaction
from .unit_of_work import ExecutionOutcome, OutcomeSet, UnitOfWork

__all__ = [
    "ConnectionCollector",
    "EntityRegistry",
    "ExecutionOutcome",
    "OperationKind",
    "OutcomeSet",
    "PendingOperation",
    "Transaction",
    "TransactionCoordinator",
    "TransactionState",
    "UnitOfWork",
]
