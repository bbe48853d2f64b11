"""Apply column-keyed values onto a record in place."""

from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError
from numbers import Number
from typing import Any, Optional

from .contracts import ErrorSink
from .record_schema import UPDATED_AT, FieldSpec, record_schema
from .types import Clock, ColumnValuesInput

logger = logging.getLogger(__name__)


def apply_column_values(
    record: Any,
    values: ColumnValuesInput,
    *,
    clock: Clock,
    errors: Optional[ErrorSink] = None,
) -> bool:
    """Assign `values` (keyed by column name) onto matching record fields.

    Columns the record does not declare are skipped. Integer fields take
    integral incoming numbers as `int`. When `values` carries the update
    timestamp column (as `updated_at` or `UpdatedAt`) and any other field
    changed, the record's update timestamp is stamped with the clock,
    whatever value the map supplied.

    Args:
        record: Dataclass record, or `None` when there is nothing to compare
            against (the values are then final as given).
        values: Column name to new value.
        clock: Source of "now" for the update timestamp.
        errors: Sink for assignment failures on frozen records.

    Returns:
        Whether any field value actually changed.
    """

    if record is None:
        return True

    schema = record_schema(type(record))
    stamp = schema.field_for_column(UPDATED_AT)
    changed = False
    other_changed = False
    stamp_given = False
    for column, new_value in values.items():
        spec = schema.field_for_column(column)
        if spec is None:
            continue
        if spec is stamp:
            stamp_given = True
        if _assign(record, spec, new_value, errors):
            changed = True
            if spec is not stamp:
                other_changed = True

    if stamp is not None and stamp_given and other_changed:
        _set(record, stamp.name, clock(), errors)

    if changed:
        logger.debug("applied column values to %s", type(record).__name__)
    return changed


def _assign(record: Any, spec: FieldSpec, new_value: Any, errors: Optional[ErrorSink]) -> bool:
    current = getattr(record, spec.name, None)
    if _is_int_field(spec, current) and _is_integral(new_value):
        new_value = int(new_value)
    if current == new_value and type(current) is type(new_value):
        return False
    return _set(record, spec.name, new_value, errors)


def _set(record: Any, name: str, value: Any, errors: Optional[ErrorSink]) -> bool:
    try:
        setattr(record, name, value)
    except FrozenInstanceError as exc:
        if errors is None:
            raise
        errors.report(exc)
        return False
    return True


def _is_int_field(spec: FieldSpec, current: Any) -> bool:
    if isinstance(current, bool):
        return False
    if isinstance(current, int):
        return True
    return spec.annotation is int


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Number):
        return False
    try:
        return int(value) == value
    except (TypeError, ValueError, OverflowError):
        return False
