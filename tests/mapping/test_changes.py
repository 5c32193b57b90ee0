from decimal import Decimal

import pytest

from sqlmapper.errors import MappingError
from sqlmapper.mapping import AttributeAccessor, MappingAccessor, Record, is_numeric, row_data, values_equal

COLUMNS = {"id": "id", "name": "first_name", "score": "score"}


@pytest.mark.parametrize(
    "new, old",
    [
        (88, "88"),
        ("88", 88),
        ("88.0", 88),
        (1.5, "1.50"),
        (" 7 ", 7),
        ("1e3", 1000),
        (Decimal("2.5"), "2.5"),
        ("Foo", "Foo"),
        (None, None),
    ],
)
def test_values_equal(new, old):
    assert values_equal(new, old)


@pytest.mark.parametrize(
    "new, old",
    [
        (88, "69"),
        ("Foo", "foo"),
        (1, True),
        (0, None),
        ("", None),
        ("abc", 0),
        ("1_000", 1000),
        ("\u0668\u0668", 88),
    ],
)
def test_values_not_equal(new, old):
    assert not values_equal(new, old)


def test_is_numeric():
    assert is_numeric(3)
    assert is_numeric("-4.25")
    assert is_numeric(".5")
    assert not is_numeric(True)
    assert not is_numeric("nan")
    assert not is_numeric("12abc")
    assert not is_numeric("\u0661\u0662")
    assert not is_numeric(None)


def test_row_data_without_baseline_maps_every_column():
    entity = Record(id=3, first_name="Anna", score=10)
    assert row_data(entity, COLUMNS, AttributeAccessor()) == {"id": 3, "name": "Anna", "score": 10}


def test_row_data_with_baseline_keeps_changes_and_identity():
    entity = Record(id=3, first_name="Annabelle", score=10)
    baseline = {"id": 3, "first_name": "Anna", "score": "10"}

    data = row_data(entity, COLUMNS, AttributeAccessor(), baseline=baseline, primary_column="id")

    assert data == {"id": 3, "name": "Annabelle"}


def test_row_data_treats_fields_missing_from_baseline_as_changed():
    entity = Record(id=3, first_name="Anna", score=10)
    data = row_data(entity, COLUMNS, AttributeAccessor(), baseline={"first_name": "Anna"}, primary_column="id")
    assert data == {"id": 3, "score": 10}


def test_row_data_requires_primary_column_with_baseline():
    with pytest.raises(ValueError):
        row_data(Record(id=1, first_name="A", score=1), COLUMNS, AttributeAccessor(), baseline={})


def test_row_data_reports_missing_entity_field():
    with pytest.raises(MappingError):
        row_data(Record(id=1), COLUMNS, AttributeAccessor())


def test_row_data_supports_mapping_entities():
    entity = {"id": 1, "first_name": "Anna", "score": 2}
    assert row_data(entity, COLUMNS, MappingAccessor()) == {"id": 1, "name": "Anna", "score": 2}
    with pytest.raises(MappingError):
        row_data({"id": 1}, COLUMNS, MappingAccessor())
