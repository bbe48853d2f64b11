"""Value capabilities recognised when classifying record fields."""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

V = TypeVar("V")


class FieldKind(str, Enum):
    """Storage role of a field's declared type."""

    SCALAR = "scalar"
    TIMESTAMP = "timestamp"
    NULLABLE = "nullable"
    STRUCT = "struct"
    STRUCT_LIST = "struct_list"
    UNKNOWN = "unknown"


class AssociationRole(str, Enum):
    """Persistence order of an associated record relative to its owner."""

    NONE = "none"
    BEFORE = "before"
    AFTER = "after"


@runtime_checkable
class NullableValue(Protocol):
    """A column value that carries its own validity flag."""

    value: Any
    valid: bool


@dataclass
class Nullable(Generic[V]):
    """Nullable column value, stored as a plain column.

    `Nullable.of("x")` is a valid value, `Nullable()` is SQL NULL.
    """

    value: Optional[V] = None
    valid: bool = False

    @classmethod
    def of(cls, value: V) -> "Nullable[V]":
        return cls(value=value, valid=True)


def is_nullable_type(tp: Any) -> bool:
    """Return whether a type exposes the nullable-value capability."""

    if not isinstance(tp, type):
        return False
    if issubclass(tp, Nullable):
        return True
    if not is_dataclass(tp):
        return False
    names = {f.name for f in fields(tp)}
    return {"value", "valid"} <= names


def is_record_type(tp: Any) -> bool:
    """Return whether a type is a nested record (non-nullable dataclass)."""

    return isinstance(tp, type) and is_dataclass(tp) and not is_nullable_type(tp)
