import pytest

from sqlmapper.errors import NoSuchMapper, UsageError
from sqlmapper.mapping import MapperLocator


def test_factory_runs_once(person_mapper):
    calls = []

    def factory():
        calls.append(1)
        return person_mapper

    locator = MapperLocator({"people": factory})
    assert calls == []
    assert locator.get("people") is person_mapper
    assert locator.resolve("people") is person_mapper
    assert calls == [1]


def test_unknown_name(person_mapper):
    locator = MapperLocator({"people": lambda: person_mapper})
    with pytest.raises(NoSuchMapper) as excinfo:
        locator.get("pets")
    assert str(excinfo.value) == "No mapper registered under 'pets'"
    assert isinstance(excinfo.value, UsageError)
    assert isinstance(excinfo.value, KeyError)


def test_set_replaces_memoised_mapper(people_db_factory):
    _, first = people_db_factory("first")
    _, second = people_db_factory("second")
    locator = MapperLocator({"people": lambda: first})
    assert locator.get("people") is first

    locator.set("people", lambda: second)
    assert locator.get("people") is second


def test_container_protocol(people_db_factory):
    _, east = people_db_factory("east")
    _, west = people_db_factory("west")
    locator = MapperLocator({"east": lambda: east, "west": lambda: west})

    assert "east" in locator
    assert "north" not in locator
    assert len(locator) == 2
    assert locator.names() == ["east", "west"]
    assert list(locator) == [east, west]
