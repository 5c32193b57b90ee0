"""
Run arbitrary work inside one transaction spanning every mapper's write connection.
"""

from __future__ import annotations

from typing import Any, Callable

from ..mapping.locator import MapperLocator
from ..mapping.mapper import Mapper
from ..utils import get_logger
from .collector import ConnectionCollector
from .coordinator import TransactionCoordinator, TransactionState


class Transaction:
    """
    ``exec(work)`` calls ``work(self)`` between begin and commit; mappers are
    reachable as ``transaction["name"]``. On an exception everything is
    rolled back and the exception becomes :attr:`result`.
    """

    def __init__(self, mapper_locator: MapperLocator) -> None:
        self.mappers = mapper_locator
        self.collector = ConnectionCollector(mapper_locator)
        self.result: Any = None
        self.rollback_errors: list = []
        self.logger = get_logger("persistence.transaction")

    def __getitem__(self, name: str) -> Mapper:
        return self.mappers.get(name)

    def exec(self, work: Callable[["Transaction"], Any]) -> bool:
        self.result = None
        self.rollback_errors = []
        coordinator = TransactionCoordinator()
        try:
            coordinator.collect(self.collector)
            coordinator.begin()
            self.result = work(self)
            coordinator.commit()
        except Exception as exc:
            self.logger.warning("Transaction rolled back: %s", exc)
            self.result = exc
            if coordinator.state is not TransactionState.ROLLED_BACK:
                coordinator.rollback()
            self.rollback_errors = list(coordinator.rollback_errors)
            return False
        return True
