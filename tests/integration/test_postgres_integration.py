import os
import uuid

import pytest

from sqlmapper import UnitOfWork
from sqlmapper.adapters import ConnectionConfig
from sqlmapper.adapters.postgres import PostgresAdapter
from sqlmapper.connections import ConnectionLocator
from sqlmapper.mapping import Gateway, Mapper, MapperLocator, Record


def _require_postgres_adapter():
    pytest.importorskip("psycopg")
    dsn = os.getenv("SQLMAPPER_POSTGRES_DSN")
    if not dsn:
        pytest.skip("SQLMAPPER_POSTGRES_DSN not set; skipping Postgres integration test")
    adapter = PostgresAdapter()
    try:
        adapter.connect(ConnectionConfig.from_dsn(dsn))
    except Exception as exc:  # pragma: no cover - environment dependent
        pytest.skip(f"Cannot connect to Postgres for integration test: {exc}")
    return adapter


@pytest.fixture
def pg_people():
    adapter = _require_postgres_adapter()
    table = f"sqlmapper_people_{uuid.uuid4().hex[:8]}"
    adapter.execute(f'CREATE TABLE "{table}" (id SERIAL PRIMARY KEY, name TEXT NOT NULL)')
    mapper = Mapper(
        Gateway(ConnectionLocator(default=lambda: adapter), table=table, primary_column="id"),
        columns={"id": "id", "name": "name"},
    )
    yield adapter, mapper
    adapter.execute(f'DROP TABLE IF EXISTS "{table}"')
    adapter.close()


def test_unit_of_work_roundtrip(pg_people):
    adapter, mapper = pg_people
    work = UnitOfWork(MapperLocator({"people": lambda: mapper}))

    anna = Record(id=None, name="Anna")
    work.insert("people", anna)
    assert work.exec() is True
    assert anna.id == 1

    baseline = mapper.snapshot(anna)
    anna.name = "Annabelle"
    work.update("people", anna, baseline)
    assert work.exec() is True
    assert mapper.fetch_entity_by("id", 1).name == "Annabelle"


def test_failed_batch_rolls_back(pg_people):
    adapter, mapper = pg_people
    work = UnitOfWork(MapperLocator({"people": lambda: mapper}))

    work.insert("people", Record(id=None, name="Anna"))
    work.insert("people", Record(id=None, name=None))

    assert work.exec() is False
    assert mapper.fetch_collection(mapper.select()) == []
