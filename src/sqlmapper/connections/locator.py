"""
Lazily instantiated default, read and write connections.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, Mapping, Optional

from ..adapters import ConnectionConfig, DatabaseAdapter, create_adapter
from ..errors import NoSuchConnection
from ..utils import get_logger

ConnectionFactory = Callable[[], DatabaseAdapter]


class ConnectionLocator:
    """
    Holds connection factories and the adapters they produced.

    Each factory runs at most once; later lookups return the memoised
    adapter. Without read or write factories every lookup falls back to the
    default connection, so a single-database setup shares one adapter for
    reads and writes.
    """

    def __init__(
        self,
        default: Optional[ConnectionFactory] = None,
        read: Optional[Mapping[str, ConnectionFactory]] = None,
        write: Optional[Mapping[str, ConnectionFactory]] = None,
    ) -> None:
        self._default = default
        self._default_instance: DatabaseAdapter | None = None
        self._factories: Dict[str, Dict[str, ConnectionFactory]] = {"read": {}, "write": {}}
        self._instances: Dict[str, Dict[str, DatabaseAdapter]] = {"read": {}, "write": {}}
        self.logger = get_logger("connections.locator")
        for name, factory in (read or {}).items():
            self.set_read(name, factory)
        for name, factory in (write or {}).items():
            self.set_write(name, factory)

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> "ConnectionLocator":
        return cls(default=lambda: create_adapter(config))

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs) -> "ConnectionLocator":
        return cls.from_config(ConnectionConfig.from_dsn(dsn, **kwargs))

    # ------------------------------------------------------------------ #
    def set_default(self, factory: ConnectionFactory) -> None:
        self._default = factory
        self._default_instance = None

    def set_read(self, name: str, factory: ConnectionFactory) -> None:
        self._factories["read"][name] = factory
        self._instances["read"].pop(name, None)

    def set_write(self, name: str, factory: ConnectionFactory) -> None:
        self._factories["write"][name] = factory
        self._instances["write"].pop(name, None)

    # ------------------------------------------------------------------ #
    def get_default(self) -> DatabaseAdapter:
        if self._default_instance is None:
            if self._default is None:
                raise NoSuchConnection("default", "default")
            self._default_instance = self._default()
            self.logger.debug("Instantiated default connection")
        return self._default_instance

    def get_read(self, name: Optional[str] = None) -> DatabaseAdapter:
        return self._get("read", name)

    def get_write(self, name: Optional[str] = None) -> DatabaseAdapter:
        return self._get("write", name)

    def _get(self, kind: str, name: Optional[str]) -> DatabaseAdapter:
        factories = self._factories[kind]
        if name is None:
            if not factories:
                return self.get_default()
            name = random.choice(list(factories))
        if name not in factories:
            raise NoSuchConnection(kind, name)
        instances = self._instances[kind]
        if name not in instances:
            instances[name] = factories[name]()
            self.logger.debug("Instantiated %s connection %r", kind, name)
        return instances[name]
