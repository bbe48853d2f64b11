"""Field classification: column roles, blank state, and timestamp autofill."""

from __future__ import annotations

import logging
from collections.abc import Sized
from dataclasses import FrozenInstanceError, dataclass, is_dataclass
from datetime import datetime
from numbers import Number
from typing import Any, FrozenSet, List, Optional, get_args

from .capabilities import AssociationRole, FieldKind, NullableValue
from .config import DEFAULT_MAX_NESTING_DEPTH
from .contracts import DialectPort, ErrorSink
from .record_schema import FieldSpec, record_schema, resolve_field_spec
from .types import CREATE, UPDATE, Clock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDescriptor:
    """Classified view of one record field at one point in time.

    `sql_type` is empty when the field is not a persisted column (an
    association, an unknown kind, or a field tagged `"-"`).
    """

    name: str
    db_name: str
    value: Any
    sql_type: str = ""
    is_primary_key: bool = False
    is_blank: bool = False
    auto_create_time: bool = False
    auto_update_time: bool = False
    association: AssociationRole = AssociationRole.NONE
    foreign_key: str = ""

    @property
    def is_before_association(self) -> bool:
        return self.association is AssociationRole.BEFORE

    @property
    def is_after_association(self) -> bool:
        return self.association is AssociationRole.AFTER


def is_zero_time(value: Any) -> bool:
    """Return whether a timestamp value is unset (`None` or `datetime.min`)."""

    if value is None:
        return True
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) == datetime.min
    return False


def is_blank(value: Any, *, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> bool:
    """Return whether a field value equals its type's zero value.

    Nested records are blank when every one of their own fields is blank.
    A nested record already being checked further up (a cycle), or one
    deeper than `max_depth`, counts as not blank.
    """

    return _is_blank(value, frozenset(), 0, max_depth)


def _is_blank(value: Any, seen: FrozenSet[int], depth: int, max_depth: int) -> bool:
    if value is None:
        return True
    if isinstance(value, datetime):
        return is_zero_time(value)
    if isinstance(value, NullableValue):
        return not value.valid
    if is_dataclass(value) and not isinstance(value, type):
        return _is_blank_record(value, seen, depth, max_depth)
    if isinstance(value, bool):
        return value is False
    if isinstance(value, Number):
        return value == 0
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def _is_blank_record(record: Any, seen: FrozenSet[int], depth: int, max_depth: int) -> bool:
    if id(record) in seen:
        logger.debug("cycle in nested %s, treating as not blank", type(record).__name__)
        return False
    if depth >= max_depth:
        logger.debug(
            "nested %s exceeds depth %d, treating as not blank",
            type(record).__name__,
            max_depth,
        )
        return False

    inner_seen = seen | {id(record)}
    for spec in record_schema(type(record)).fields:
        if not _is_blank(getattr(record, spec.name, None), inner_seen, depth + 1, max_depth):
            return False
    return True


def describe_fields(
    record: Any,
    *,
    dialect: DialectPort,
    errors: Optional[ErrorSink] = None,
    max_depth: int = DEFAULT_MAX_NESTING_DEPTH,
) -> List[FieldDescriptor]:
    """Classify every exported field of `record` without modifying it.

    Args:
        record: Dataclass record instance.
        dialect: Source of storage type tags for persisted columns.
        errors: Sink for unparseable `sql` tags (the tag is then ignored).
        max_depth: Recursion limit for nested blank checks.

    Returns:
        One descriptor per exported field, in declaration order.
    """

    schema = record_schema(type(record))
    descriptors = []
    for declared in schema.fields:
        value = getattr(record, declared.name, None)
        spec = resolve_field_spec(schema.model, declared, value)
        if spec.tag_error is not None and errors is not None:
            errors.report(spec.tag_error)

        descriptors.append(
            FieldDescriptor(
                name=spec.name,
                db_name=spec.db_name,
                value=value,
                sql_type=storage_type(spec, value, dialect),
                is_primary_key=spec.is_primary_key,
                is_blank=is_blank(value, max_depth=max_depth),
                auto_create_time=spec.auto_create_time,
                auto_update_time=spec.auto_update_time,
                association=spec.association,
                foreign_key=spec.foreign_key,
            )
        )
    return descriptors


def storage_type(spec: FieldSpec, value: Any, dialect: DialectPort) -> str:
    """Resolve the column type tag of a field, empty if it is not a column."""

    if spec.tag.skip:
        return ""
    if not (spec.is_timestamp or spec.is_primary_key):
        if spec.kind not in (FieldKind.SCALAR, FieldKind.NULLABLE):
            return ""

    typ = spec.tag.type
    if not typ:
        sample = _sample_value(spec, value)
        if spec.is_primary_key:
            typ = dialect.primary_key_tag(sample, spec.tag.size)
        else:
            typ = dialect.sql_tag(sample, spec.tag.size)

    if spec.tag.modifiers:
        typ = f"{typ} {spec.tag.modifiers}"
    return typ


def _sample_value(spec: FieldSpec, value: Any) -> Any:
    """A value (or type) representative of what the column stores."""

    if spec.kind is FieldKind.NULLABLE:
        inner = getattr(value, "value", None)
        if inner is not None:
            return inner
        args = get_args(spec.annotation)
        return args[0] if args else None
    if value is not None:
        return value
    return spec.annotation


def apply_timestamps(
    record: Any,
    operation: str,
    *,
    clock: Clock,
    errors: Optional[ErrorSink] = None,
) -> List[str]:
    """Autofill `created_at`/`updated_at` timestamp fields in place.

    `create` fills either field only while it is unset; `update` always
    overwrites `updated_at`. Any other operation changes nothing. All
    fields filled in one call receive the same clock reading.

    Returns:
        Names of the fields that were assigned.
    """

    if operation not in (CREATE, UPDATE):
        return []

    schema = record_schema(type(record))
    now = None
    filled = []
    for declared in schema.fields:
        value = getattr(record, declared.name, None)
        spec = resolve_field_spec(schema.model, declared, value)
        if not spec.is_timestamp:
            continue

        if operation == CREATE:
            fill = (spec.auto_create_time or spec.auto_update_time) and is_zero_time(value)
        else:
            fill = spec.auto_update_time
        if not fill:
            continue

        if now is None:
            now = clock()
        try:
            setattr(record, spec.name, now)
        except FrozenInstanceError as exc:
            if errors is None:
                raise
            errors.report(exc)
            continue
        filled.append(spec.name)

    if filled:
        logger.debug("%s: stamped %s on %s", operation, filled, type(record).__name__)
    return filled
