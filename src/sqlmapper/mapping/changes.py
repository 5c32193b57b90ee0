"""
Change-set calculation for inserts and updates.

Without a baseline every mapped column is written. With a baseline only the
columns whose value differs are kept, plus the primary column so the update
can be pinned to its row. Two values that both look numeric compare by
numeric value (``"88"`` equals ``88``); anything else must match in type and
value (``"Foo"`` differs from ``"foo"`` and ``1`` differs from ``True``).
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from .accessors import FieldAccessor

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$", re.ASCII)
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)

_MISSING = object()


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    if isinstance(value, str):
        return _NUMERIC_RE.match(value) is not None
    return False


def _as_number(value: Any) -> int | float | Decimal:
    if isinstance(value, str):
        return int(value) if _INTEGER_RE.match(value) else float(value)
    return value


def values_equal(new: Any, old: Any) -> bool:
    if is_numeric(new) and is_numeric(old):
        new_number = _as_number(new)
        old_number = _as_number(old)
        if isinstance(new_number, float) or isinstance(old_number, float):
            return float(new_number) == float(old_number)
        return new_number == old_number
    return type(new) is type(old) and new == old


def row_data(
    entity: Any,
    column_field_map: Mapping[str, str],
    accessor: FieldAccessor,
    *,
    baseline: Optional[Mapping[str, Any]] = None,
    primary_column: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the column-to-value payload for ``entity``.

    ``primary_column`` is required when a baseline is given; a field missing
    from the baseline counts as changed.
    """

    if baseline is None:
        return {column: accessor.get(entity, field) for column, field in column_field_map.items()}

    if primary_column is None:
        raise ValueError("primary_column is required to diff against a baseline.")
    identity_field = column_field_map.get(primary_column, primary_column)
    data: Dict[str, Any] = {primary_column: accessor.get(entity, identity_field)}
    for column, field in column_field_map.items():
        if column == primary_column:
            continue
        new = accessor.get(entity, field)
        old = baseline.get(field, _MISSING)
        if old is _MISSING or not values_equal(new, old):
            data[column] = new
    return data
