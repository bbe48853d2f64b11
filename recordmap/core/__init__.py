"""Public core API for record field introspection and mapping."""

from .capabilities import AssociationRole, FieldKind, Nullable, NullableValue
from .config import MapperConfig
from .contracts import DialectPort, ErrorSink
from .errors import ErrorCollector, ModelNotSetError, RecordMapError, SqlTagError
from .fields import FieldDescriptor, apply_timestamps, describe_fields, is_blank
from .mutation import apply_column_values
from .naming import (
    NamingResolver,
    attribute_for_column,
    column_name,
    pluralize,
    to_pascal_case,
    to_snake_case,
)
from .record_model import RecordModel
from .record_schema import FieldSpec, RecordSchema, record_schema
from .sql_tags import SqlTag, parse_sql_tag
from .types import CREATE, NULL, UPDATE

__all__ = [
    "AssociationRole",
    "CREATE",
    "DialectPort",
    "ErrorCollector",
    "ErrorSink",
    "FieldDescriptor",
    "FieldKind",
    "FieldSpec",
    "MapperConfig",
    "ModelNotSetError",
    "NULL",
    "NamingResolver",
    "Nullable",
    "NullableValue",
    "RecordMapError",
    "RecordModel",
    "RecordSchema",
    "SqlTag",
    "SqlTagError",
    "UPDATE",
    "apply_column_values",
    "attribute_for_column",
    "column_name",
    "apply_timestamps",
    "describe_fields",
    "is_blank",
    "parse_sql_tag",
    "pluralize",
    "record_schema",
    "to_pascal_case",
    "to_snake_case",
]
