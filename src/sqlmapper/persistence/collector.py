"""
Collects the distinct write connections behind a set of mappers.
"""

from __future__ import annotations

from typing import Iterable, List

from ..adapters.base import DatabaseAdapter
from ..mapping.locator import MapperLocator
from ..mapping.mapper import Mapper
from .registry import EntityRegistry


class ConnectionCollector:
    """
    Resolves write connections fresh on every call; mappers sharing one
    physical connection contribute it once.
    """

    def __init__(self, mapper_locator: MapperLocator) -> None:
        self.mapper_locator = mapper_locator

    def collect(self, registry: EntityRegistry) -> List[DatabaseAdapter]:
        return self._distinct(self.mapper_locator.get(name) for name in registry.mapper_names())

    def collect_all(self) -> List[DatabaseAdapter]:
        return self._distinct(iter(self.mapper_locator))

    @staticmethod
    def _distinct(mappers: Iterable[Mapper]) -> List[DatabaseAdapter]:
        seen: set[int] = set()
        connections: List[DatabaseAdapter] = []
        for mapper in mappers:
            connection = mapper.get_write_connection()
            if id(connection) in seen:
                continue
            seen.add(id(connection))
            connections.append(connection)
        return connections
