"""
Registry of named mappers instantiated on first use.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Mapping, Optional

from ..errors import NoSuchMapper
from .mapper import Mapper

MapperFactory = Callable[[], Mapper]


class MapperLocator:
    """
    Maps names to mapper factories and memoises the mapper each one builds.
    """

    def __init__(self, factories: Optional[Mapping[str, MapperFactory]] = None) -> None:
        self._factories: Dict[str, MapperFactory] = {}
        self._instances: Dict[str, Mapper] = {}
        for name, factory in (factories or {}).items():
            self.set(name, factory)

    def set(self, name: str, factory: MapperFactory) -> None:
        self._factories[name] = factory
        self._instances.pop(name, None)

    def get(self, name: str) -> Mapper:
        if name not in self._instances:
            try:
                factory = self._factories[name]
            except KeyError:
                raise NoSuchMapper(name) from None
            self._instances[name] = factory()
        return self._instances[name]

    resolve = get

    def names(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __iter__(self) -> Iterator[Mapper]:
        """
        Iterate over every registered mapper, instantiating as needed.
        """
        for name in self.names():
            yield self.get(name)
