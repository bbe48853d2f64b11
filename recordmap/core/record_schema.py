"""Per-type field layout of dataclass records, computed once per class."""

from __future__ import annotations

import inspect
import logging
import sys
import types
from collections.abc import Mapping as MappingABC, Sequence as SequenceABC
from dataclasses import Field, dataclass, fields, is_dataclass, replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import (
    Any,
    Dict,
    Literal,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)
from uuid import UUID

from .capabilities import (
    AssociationRole,
    FieldKind,
    NullableValue,
    is_nullable_type,
    is_record_type,
)
from .errors import SqlTagError
from .naming import attribute_for_column, column_name, to_pascal_case
from .sql_tags import EMPTY_TAG, SqlTag, field_sql_tag

logger = logging.getLogger(__name__)

PRIMARY_KEY = "Id"
CREATED_AT = "created_at"
UPDATED_AT = "updated_at"

SCALAR_TYPES: Tuple[type, ...] = (
    bool,
    int,
    float,
    str,
    bytes,
    bytearray,
    memoryview,
    Decimal,
    datetime,
    date,
    time,
    timedelta,
    UUID,
    Enum,
    dict,
    list,
    tuple,
    set,
    frozenset,
)
SEQUENCE_ORIGINS = (list, tuple, set, frozenset, SequenceABC)


@dataclass(frozen=True)
class FieldSpec:
    """Type-level description of one record field.

    `dynamic` specs have no usable annotation; their kind and association
    are resolved from the runtime value by `resolve_field_spec()`.
    """

    name: str
    db_name: str
    annotation: Any
    kind: FieldKind
    tag: SqlTag = EMPTY_TAG
    tag_error: Optional[SqlTagError] = None
    element_type: Optional[type] = None
    is_primary_key: bool = False
    auto_create_time: bool = False
    auto_update_time: bool = False
    association: AssociationRole = AssociationRole.NONE
    foreign_key: str = ""
    dynamic: bool = False

    @property
    def is_timestamp(self) -> bool:
        return self.kind is FieldKind.TIMESTAMP


@dataclass(frozen=True)
class RecordSchema:
    """Ordered field layout of one record type."""

    model: Type[Any]
    fields: Tuple[FieldSpec, ...]

    def field(self, name: str) -> Optional[FieldSpec]:
        """Return a field by its declared identifier."""

        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def field_for_column(self, column: str) -> Optional[FieldSpec]:
        """Return the field stored in `column` (or named `column`)."""

        name = attribute_for_column(self.model, column)
        return self.field(name) if name is not None else None

    @property
    def primary_key(self) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.is_primary_key:
                return spec
        return None


def require_dataclass_model(cls: Type[Any]) -> None:
    """Validate that a class is a dataclass model."""

    if not is_dataclass(cls):
        raise TypeError(f"{cls.__name__} must be a dataclass.")


def primary_key_db() -> str:
    return column_name(PRIMARY_KEY)


@lru_cache(maxsize=None)
def record_schema(cls: Type[Any]) -> RecordSchema:
    """Build (once per class) the field layout of a dataclass record type.

    Only exported fields (no leading underscore) are described, in
    declaration order. Inherited dataclass fields are included.

    Raises:
        TypeError: If `cls` is not a dataclass, or two fields map to the
            same column.
    """

    require_dataclass_model(cls)
    hints = _model_type_hints(cls)
    specs = []
    owners: Dict[str, str] = {}
    for field in fields(cls):
        if field.name.startswith("_"):
            continue
        spec = _build_field_spec(cls, field, hints.get(field.name, field.type))
        if spec.db_name in owners:
            raise TypeError(
                f"{cls.__name__}: fields {owners[spec.db_name]!r} and {field.name!r} "
                f"both map to column {spec.db_name!r}."
            )
        owners[spec.db_name] = field.name
        specs.append(spec)
    logger.debug("built record schema for %s (%d fields)", cls.__name__, len(specs))
    return RecordSchema(model=cls, fields=tuple(specs))


def resolve_field_spec(owner: Type[Any], spec: FieldSpec, value: Any) -> FieldSpec:
    """Return `spec`, with kind and association taken from `value` if dynamic."""

    if not spec.dynamic:
        return spec
    kind, element_type = kind_of_value(value)
    if value is None and spec.db_name in (CREATED_AT, UPDATED_AT):
        kind = FieldKind.TIMESTAMP
    if kind is FieldKind.TIMESTAMP:
        return replace(
            spec,
            kind=kind,
            annotation=datetime,
            auto_create_time=spec.db_name == CREATED_AT,
            auto_update_time=spec.db_name == UPDATED_AT,
        )
    resolved = replace(spec, kind=kind, element_type=element_type)
    if spec.is_primary_key:
        return resolved
    association, foreign_key = _infer_association(owner, resolved)
    return replace(resolved, association=association, foreign_key=foreign_key)


def kind_of_type(annotation: Any) -> Tuple[Optional[FieldKind], Optional[type]]:
    """Classify a declared type; `(None, None)` when it cannot decide."""

    base = unwrap_optional(annotation)
    if base is Any or isinstance(base, (str, TypeVar)):
        return None, None

    origin = get_origin(base)
    if origin is not None:
        if isinstance(origin, type) and is_nullable_type(origin):
            return FieldKind.NULLABLE, None
        if origin in SEQUENCE_ORIGINS:
            args = get_args(base)
            item = args[0] if args else None
            if is_record_type(item):
                return FieldKind.STRUCT_LIST, item
            return FieldKind.SCALAR, None
        if origin in (Union, types.UnionType):
            return None, None
        if origin is Literal or origin is MappingABC:
            return FieldKind.SCALAR, None
        if isinstance(origin, type) and issubclass(origin, SCALAR_TYPES):
            return FieldKind.SCALAR, None
        return FieldKind.UNKNOWN, None

    if not isinstance(base, type):
        return FieldKind.UNKNOWN, None
    if issubclass(base, datetime):
        return FieldKind.TIMESTAMP, None
    if is_nullable_type(base):
        return FieldKind.NULLABLE, None
    if is_record_type(base):
        return FieldKind.STRUCT, base
    if issubclass(base, SCALAR_TYPES):
        return FieldKind.SCALAR, None
    return FieldKind.UNKNOWN, None


def kind_of_value(value: Any) -> Tuple[FieldKind, Optional[type]]:
    """Classify a runtime value when no declared type is available."""

    if value is None:
        return FieldKind.SCALAR, None
    if isinstance(value, datetime):
        return FieldKind.TIMESTAMP, None
    if isinstance(value, NullableValue) and is_dataclass(value):
        return FieldKind.NULLABLE, None
    if is_dataclass(value) and not isinstance(value, type):
        return FieldKind.STRUCT, type(value)
    if isinstance(value, (list, tuple)) and value and is_record_type(type(value[0])):
        return FieldKind.STRUCT_LIST, type(value[0])
    if isinstance(value, SCALAR_TYPES):
        return FieldKind.SCALAR, None
    return FieldKind.UNKNOWN, None


def unwrap_optional(annotation: Any) -> Any:
    """Extract the wrapped type from `Optional[T]` style annotations."""

    origin = get_origin(annotation)
    if origin is None:
        return annotation

    if origin not in {Union, types.UnionType}:
        return annotation

    all_args = get_args(annotation)
    args = [arg for arg in all_args if arg is not type(None)]
    if len(args) == 1 and len(all_args) == 2:
        return args[0]
    return annotation


def _build_field_spec(owner: Type[Any], field: Field[Any], annotation: Any) -> FieldSpec:
    db_name = column_name(field.name)
    tag, tag_error = _safe_sql_tag(field)
    kind, element_type = kind_of_type(annotation)
    spec = FieldSpec(
        name=field.name,
        db_name=db_name,
        annotation=unwrap_optional(annotation),
        kind=kind or FieldKind.UNKNOWN,
        tag=tag,
        tag_error=tag_error,
        element_type=element_type,
        is_primary_key=db_name == primary_key_db(),
        dynamic=kind is None,
    )
    if spec.dynamic:
        return spec

    if spec.is_timestamp:
        return replace(
            spec,
            auto_create_time=db_name == CREATED_AT,
            auto_update_time=db_name == UPDATED_AT,
        )
    if spec.is_primary_key:
        return spec

    association, foreign_key = _infer_association(owner, spec)
    return replace(spec, association=association, foreign_key=foreign_key)


def _infer_association(owner: Type[Any], spec: FieldSpec) -> Tuple[AssociationRole, str]:
    """Derive association role and foreign key by naming convention.

    A list of records is referenced from the other side through an
    `<Owner>Id` field. A single record is either referenced by a sibling
    `<Field>Id` field on the owner, or references the owner by `<Owner>Id`.
    """

    owner_fk = column_name(owner.__name__ + PRIMARY_KEY)

    if spec.kind is FieldKind.STRUCT_LIST:
        return AssociationRole.AFTER, _column_field(spec.element_type, owner_fk)

    if spec.kind is FieldKind.STRUCT:
        sibling_fk = column_name(to_pascal_case(spec.name) + PRIMARY_KEY)
        sibling = _column_field(owner, sibling_fk)
        if sibling:
            return AssociationRole.BEFORE, sibling
        return AssociationRole.AFTER, _column_field(spec.element_type, owner_fk)

    return AssociationRole.NONE, ""


def _column_field(cls: Optional[type], column: str) -> str:
    """Name of the field of `cls` stored in `column`, or an empty string."""

    if cls is None or not is_dataclass(cls):
        return ""
    for field in fields(cls):
        if column_name(field.name) == column:
            return field.name
    return ""


def _safe_sql_tag(field: Field[Any]) -> Tuple[SqlTag, Optional[SqlTagError]]:
    try:
        return field_sql_tag(field), None
    except SqlTagError as exc:
        logger.debug("ignoring sql tag on field %r: %s", field.name, exc)
        return EMPTY_TAG, SqlTagError(f"Field {field.name!r}: {exc}")


@lru_cache(maxsize=None)
def _model_type_hints(cls: Type[Any]) -> Dict[str, Any]:
    """Resolved annotations of `cls`, field by field when some cannot resolve.

    Names are looked up in each declaring class's module, then in the
    locals of the calling frames so classes defined inside a function
    still resolve. Annotations that fail are left out; such fields fall
    back to runtime classification.
    """

    try:
        return dict(get_type_hints(cls))
    except Exception as exc:
        logger.debug("resolving %s annotations per field: %s", cls.__name__, exc)

    localns = _caller_namespace()
    localns[cls.__name__] = cls
    hints: Dict[str, Any] = {}
    for base in reversed(cls.__mro__):
        module = sys.modules.get(base.__module__)
        globalns = dict(vars(module)) if module is not None else {}
        for name, annotation in inspect.get_annotations(base).items():
            if not isinstance(annotation, str):
                hints[name] = annotation
                continue
            try:
                hints[name] = eval(annotation, globalns, localns)  # noqa: S307
            except Exception as exc:
                hints.pop(name, None)
                logger.debug(
                    "%s.%s: unresolved annotation %r (%s)", cls.__name__, name, annotation, exc
                )
    return hints


def _caller_namespace() -> Dict[str, Any]:
    """Merged locals of the calling frames outside this package, innermost first."""

    package = __name__.split(".")[0]
    namespace: Dict[str, Any] = {}
    frame = inspect.currentframe()
    try:
        while frame is not None:
            module = frame.f_globals.get("__name__", "")
            if module != package and not module.startswith(package + "."):
                for name, value in frame.f_locals.items():
                    namespace.setdefault(name, value)
            frame = frame.f_back
    finally:
        del frame
    return namespace
