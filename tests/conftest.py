from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import pytest

from sqlmapper.adapters import ConnectionConfig, SQLiteAdapter
from sqlmapper.connections import ConnectionLocator
from sqlmapper.mapping import EntityFactory, Gateway, Mapper, MapperLocator

NAMES = [
    "Anna",
    "Betty",
    "Clara",
    "Donna",
    "Fiona",
    "Gertrude",
    "Hanna",
    "Ione",
    "Julia",
    "Kara",
]

CREATE_PEOPLE = """
CREATE TABLE people (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    name            VARCHAR(50) NOT NULL,
    size_scale      NUMERIC(7,3),
    default_null    CHAR(3) DEFAULT NULL,
    default_string  VARCHAR(7) DEFAULT 'string',
    default_number  NUMERIC(5) DEFAULT 12345
)
"""


@dataclass(eq=False)
class Person:
    id: Optional[int] = None
    first_name: Optional[str] = None
    size_scale: Optional[float] = None
    default_null: Optional[str] = None
    default_string: Optional[str] = None
    default_number: Optional[int] = None


class PeopleGateway(Gateway):
    table = "people"
    primary_column = "id"


class PersonMapper(Mapper):
    columns = {
        "id": "id",
        "name": "first_name",
        "size_scale": "size_scale",
        "default_null": "default_null",
        "default_string": "default_string",
        "default_number": "default_number",
    }


def open_people_db(path) -> SQLiteAdapter:
    adapter = SQLiteAdapter()
    adapter.connect(ConnectionConfig(url=f"sqlite:///{path}"))
    adapter.execute(CREATE_PEOPLE)
    for name in NAMES:
        adapter.execute("INSERT INTO people (name) VALUES (?)", (name,))
    return adapter


def build_person_mapper(adapter) -> PersonMapper:
    locator = ConnectionLocator(default=lambda: adapter)
    return PersonMapper(PeopleGateway(locator), entity_factory=EntityFactory(lambda row: Person(**row)))


@pytest.fixture
def person_cls():
    return Person


@pytest.fixture
def people_adapter(tmp_path):
    adapter = open_people_db(tmp_path / "people.db")
    yield adapter
    adapter.close()


@pytest.fixture
def person_mapper(people_adapter) -> PersonMapper:
    return build_person_mapper(people_adapter)


@pytest.fixture
def mapper_locator(person_mapper) -> MapperLocator:
    return MapperLocator({"people": lambda: person_mapper})


@pytest.fixture
def people_db_factory(tmp_path) -> Callable[[str], tuple[SQLiteAdapter, PersonMapper]]:
    """
    Open extra, independent people databases, one connection each.
    """

    opened: list[SQLiteAdapter] = []

    def factory(name: str):
        adapter = open_people_db(tmp_path / f"{name}.db")
        opened.append(adapter)
        return adapter, build_person_mapper(adapter)

    yield factory
    for adapter in opened:
        adapter.close()


@pytest.fixture
def recorded_sql(people_adapter, monkeypatch) -> list[tuple[str, list]]:
    """
    Capture every statement sent through ``people_adapter``.
    """

    recorded: list[tuple[str, list]] = []
    original = people_adapter.execute

    def execute(sql, params=None):
        recorded.append((sql, list(params or ())))
        return original(sql, params)

    monkeypatch.setattr(people_adapter, "execute", execute)
    return recorded


def count_rows(adapter, where: str = "", params: tuple = ()) -> int:
    sql = "SELECT COUNT(*) FROM people"
    if where:
        sql += f" WHERE {where}"
    return adapter.execute(sql, params).fetchone()[0]


@pytest.fixture
def row_count():
    return count_rows
