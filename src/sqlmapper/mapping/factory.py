"""
Entity construction from fetched rows.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional


class Record:
    """
    Plain attribute bag used as the default entity type.

    Records compare by identity, like any object tracked by a unit of work.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
        self.__dict__.update(data or {})
        self.__dict__.update(fields)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in self.__dict__.items())
        return f"{type(self).__name__}({fields})"


class EntityFactory:
    """
    Builds entities and collections; ``builder`` receives each row as a dict.
    """

    def __init__(self, builder: Optional[Callable[[Dict[str, Any]], Any]] = None) -> None:
        self.builder = builder or Record

    def new_entity(self, row: Optional[Mapping[str, Any]] = None) -> Any:
        return self.builder(dict(row or {}))

    def new_collection(self, rows: Iterable[Mapping[str, Any]] = ()) -> List[Any]:
        return [self.new_entity(row) for row in rows]
