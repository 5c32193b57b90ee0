import logging

import pytest

from sqlmapper import UnitOfWork, UnitOfWorkConfig
from sqlmapper.errors import MappingError, NoSuchMapper, StorageError, UsageError
from sqlmapper.persistence import OperationKind


@pytest.fixture
def work(mapper_locator):
    return UnitOfWork(mapper_locator)


def test_insert_registers_pending_operation(work, person_cls):
    person = person_cls(first_name="Laura", size_scale=10)
    work.insert("people", person)

    registry = work.get_entities()
    assert len(registry) == 1
    assert person in registry
    operation = registry.get(person)
    assert operation.kind is OperationKind.INSERT
    assert operation.mapper_name == "people"
    assert operation.baseline is None


def test_update_and_delete_register_operations(work, person_mapper):
    anna = person_mapper.fetch_entity_by("name", "Anna")
    betty = person_mapper.fetch_entity_by("name", "Betty")
    work.update("people", anna, person_mapper.snapshot(anna))
    work.delete("people", betty)

    assert [op.kind for op in work.get_entities().operations()] == [OperationKind.UPDATE, OperationKind.DELETE]
    assert work.get_entities().get(anna).baseline["first_name"] == "Anna"


def test_attaching_again_replaces_operation(work, person_cls):
    person = person_cls(first_name="Laura")
    work.insert("people", person)
    work.update("people", person)

    registry = work.get_entities()
    assert len(registry) == 1
    assert registry.get(person).kind is OperationKind.UPDATE


def test_reregistered_entity_is_replayed_last(work, person_mapper, recorded_sql):
    anna = person_mapper.fetch_entity_by("name", "Anna")
    betty = person_mapper.fetch_entity_by("name", "Betty")
    work.update("people", anna)
    work.delete("people", betty)
    work.update("people", anna, person_mapper.snapshot(anna))
    anna.first_name = "Annabelle"
    recorded_sql.clear()

    assert work.exec() is True
    statements = [sql.split(" ", 1)[0] for sql, _ in recorded_sql]
    assert statements == ["DELETE", "UPDATE"]


def test_detach_is_idempotent(work, person_cls):
    person = person_cls(first_name="Laura")
    work.detach(person)
    assert len(work.get_entities()) == 0

    work.insert("people", person)
    work.detach(person)
    work.detach(person)
    assert len(work.get_entities()) == 0

    work.delete("people", person)
    assert len(work.get_entities()) == 1
    assert work.get_entities().get(person).kind is OperationKind.DELETE


def test_unknown_mapper_is_rejected_when_attaching(work, person_cls):
    with pytest.raises(NoSuchMapper) as excinfo:
        work.insert("nobody", person_cls(first_name="Laura"))
    assert isinstance(excinfo.value, UsageError)
    assert isinstance(excinfo.value, KeyError)
    assert len(work.get_entities()) == 0


def test_load_connections_returns_mapper_write_connection(work, person_cls, people_adapter):
    assert work.load_connections() == []

    work.insert("people", person_cls(first_name="Laura"))
    assert work.load_connections() == [people_adapter]
    assert work.get_connections() == [people_adapter]


def test_exec_runs_insert_update_delete_batch(work, person_cls, person_mapper, row_count, people_adapter):
    laura = person_cls(first_name="Laura", size_scale=10)
    work.insert("people", laura)

    anna = person_mapper.fetch_entity_by("name", "Anna")
    baseline = person_mapper.snapshot(anna)
    anna.first_name = "Annabelle"
    work.update("people", anna, baseline)

    betty = person_mapper.fetch_entity_by("name", "Betty")
    work.delete("people", betty)

    assert work.exec() is True
    assert work.get_failed_entity() is None
    assert work.get_failure_error() is None

    assert laura in work.get_inserted()
    assert laura.id == 11
    assert work.get_inserted().info(laura) == {"affected": 1, "identity": 11}
    assert anna in work.get_updated()
    assert work.get_updated().info(anna)["affected"] == 1
    assert betty in work.get_deleted()
    assert list(work.get_deleted()) == [betty]

    assert person_mapper.fetch_entity_by("id", 11).first_name == "Laura"
    assert person_mapper.fetch_entity_by("id", anna.id).first_name == "Annabelle"
    assert person_mapper.fetch_entity_by("name", "Betty") is None
    assert row_count(people_adapter) == 10
    assert not people_adapter.in_transaction


def test_exec_failure_records_entity_and_error(work, person_cls, people_adapter, row_count):
    nameless = person_cls()
    work.insert("people", nameless)

    assert work.exec() is False
    assert work.get_failed_entity() is nameless
    error = work.get_failure_error()
    assert isinstance(error, StorageError)
    assert "NOT NULL" in str(error)
    assert len(work.get_inserted()) == 0
    assert row_count(people_adapter) == 10
    assert not people_adapter.in_transaction


def test_first_failure_stops_batch_and_rolls_back(
    work, person_cls, person_mapper, people_adapter, row_count, monkeypatch
):
    laura = person_cls(first_name="Laura")
    anna = person_mapper.fetch_entity_by("name", "Anna")
    betty = person_mapper.fetch_entity_by("name", "Betty")
    anna.first_name = None

    work.insert("people", laura)
    work.update("people", anna)
    work.delete("people", betty)

    deleted_calls = []
    monkeypatch.setattr(person_mapper, "delete", lambda entity: deleted_calls.append(entity))

    assert work.exec() is False
    assert work.get_failed_entity() is anna
    assert isinstance(work.get_failure_error(), StorageError)
    assert deleted_calls == []
    assert len(work.get_deleted()) == 0
    assert len(work.get_updated()) == 0

    assert row_count(people_adapter) == 10
    assert row_count(people_adapter, "name = ?", ("Laura",)) == 0
    assert row_count(people_adapter, "name = ?", ("Anna",)) == 1
    assert row_count(people_adapter, "name = ?", ("Betty",)) == 1


def test_update_with_baseline_writes_only_changed_columns(work, person_mapper, recorded_sql):
    anna = person_mapper.fetch_entity_by("name", "Anna")
    baseline = person_mapper.snapshot(anna)
    anna.first_name = "Annabelle"
    work.update("people", anna, baseline)
    recorded_sql.clear()

    assert work.exec() is True

    updates = [(sql, params) for sql, params in recorded_sql if sql.startswith("UPDATE")]
    assert updates == [('UPDATE "people" SET "name" = ? WHERE ("id" = ?)', ["Annabelle", anna.id])]


def test_numeric_strings_compare_loosely_against_baseline(work, person_mapper, recorded_sql):
    anna = person_mapper.fetch_entity_by("name", "Anna")
    baseline = dict(person_mapper.snapshot(anna), default_number="12345", size_scale="69")
    anna.size_scale = 88
    work.update("people", anna, baseline)
    recorded_sql.clear()

    assert work.exec() is True

    updates = [(sql, params) for sql, params in recorded_sql if sql.startswith("UPDATE")]
    assert updates == [('UPDATE "people" SET "size_scale" = ? WHERE ("id" = ?)', [88, anna.id])]


def test_zero_diff_update_is_skipped(work, person_mapper, recorded_sql):
    anna = person_mapper.fetch_entity_by("name", "Anna")
    work.update("people", anna, person_mapper.snapshot(anna))
    recorded_sql.clear()

    assert work.exec() is True
    assert anna in work.get_updated()
    assert work.get_updated().info(anna)["affected"] == 0
    assert not any(sql.startswith("UPDATE") for sql, _ in recorded_sql)


def test_delete_without_identity_is_a_mapping_failure(work, person_cls):
    ghost = person_cls(first_name="Ghost")
    work.delete("people", ghost)

    assert work.exec() is False
    assert work.get_failed_entity() is ghost
    assert isinstance(work.get_failure_error(), MappingError)


def test_registry_is_cleared_after_success_by_default(work, person_cls):
    work.insert("people", person_cls(first_name="Laura"))
    assert work.exec() is True
    assert len(work.get_entities()) == 0


def test_registry_is_kept_after_failure(work, person_cls):
    nameless = person_cls()
    work.insert("people", nameless)
    assert work.exec() is False
    assert nameless in work.get_entities()


def test_registry_can_be_kept_after_success(mapper_locator, person_cls):
    work = UnitOfWork(mapper_locator, config=UnitOfWorkConfig(clear_on_success=False))
    laura = person_cls(first_name="Laura")
    work.insert("people", laura)

    assert work.exec() is True
    assert laura in work.get_entities()


def test_outcome_is_reset_on_every_exec(work, person_cls):
    nameless = person_cls()
    work.insert("people", nameless)
    assert work.exec() is False

    work.detach(nameless)
    laura = person_cls(first_name="Laura")
    work.insert("people", laura)
    assert work.exec() is True
    assert work.get_failed_entity() is None
    assert work.get_failure_error() is None
    assert list(work.get_inserted()) == [laura]

    assert work.exec() is True
    assert len(work.get_inserted()) == 0


def test_reentrant_exec_is_rejected(work, person_cls, person_mapper):
    class ReentrantFilter:
        def for_insert(self, entity):
            work.exec()

        def for_update(self, entity):
            return None

    person_mapper.entity_filter = ReentrantFilter()
    laura = person_cls(first_name="Laura")
    work.insert("people", laura)

    assert work.exec() is False
    assert work.get_failed_entity() is laura
    assert isinstance(work.get_failure_error(), UsageError)


def test_exec_logs_commit_and_rollback(work, person_cls, caplog):
    caplog.set_level(logging.DEBUG, logger="sqlmapper.persistence.unit_of_work")
    work.insert("people", person_cls(first_name="Laura"))
    work.exec()
    work.insert("people", person_cls())
    work.exec()

    messages = [record.getMessage() for record in caplog.records if record.name == "sqlmapper.persistence.unit_of_work"]
    assert any("committed: 1 inserted" in message for message in messages)
    assert any("rolling back 1 connections" in message for message in messages)
