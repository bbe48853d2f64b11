"""Record handle exposing column metadata of one record to a query chain."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from ..ports.db_api.dialects import Dialect
from .config import DEFAULT_CONFIG, MapperConfig
from .contracts import DialectPort, ErrorSink
from .errors import ErrorCollector, ModelNotSetError
from .fields import FieldDescriptor, apply_timestamps, describe_fields
from .mutation import apply_column_values
from .naming import column_name
from .record_schema import PRIMARY_KEY, record_schema, require_dataclass_model
from .types import NULL, ColumnValues, ColumnValuesInput

logger = logging.getLogger(__name__)


class RecordModel:
    """Borrow a caller's record for the length of one operation.

    `data` may be a dataclass instance, a list of instances, or a record
    class (a query target). Field metadata is classified lazily, at most
    once per operation name, and never invalidated: create a new handle to
    observe later changes. A handle is not safe to share across threads.

    Args:
        data: Record (or list/class of records) being mapped. `None` is
            accepted and reported to `errors` when metadata is requested.
        dialect: Source of column storage type tags.
        errors: Sink accumulating non-fatal errors.
        config: Mapper settings (pluralization, clock, nesting depth).
    """

    def __init__(
        self,
        data: Any,
        *,
        dialect: Optional[DialectPort] = None,
        errors: Optional[ErrorSink] = None,
        config: Optional[MapperConfig] = None,
    ) -> None:
        self.data = data
        self.dialect: DialectPort = dialect or Dialect()
        self.errors: ErrorSink = errors if errors is not None else ErrorCollector()
        self.config = config or DEFAULT_CONFIG
        self._naming = self.config.naming()
        self._cache_fields: Dict[str, List[FieldDescriptor]] = {}
        self._tag_errors_reported = False

    @property
    def is_record(self) -> bool:
        """Whether the handle wraps a single record instance."""

        data = self.data
        return data is not None and not isinstance(data, (type, list, tuple))

    @property
    def is_list(self) -> bool:
        return isinstance(self.data, (list, tuple))

    def model_type(self) -> Optional[Type[Any]]:
        """Record class behind the handle (element class for lists)."""

        data = self.data
        if data is None:
            return None
        if isinstance(data, type):
            return data
        if isinstance(data, (list, tuple)):
            return type(data[0]) if data else None
        return type(data)

    def type_name(self) -> str:
        model = self.model_type()
        return model.__name__ if model is not None else ""

    def table_name(self) -> str:
        """Resolve the table name, or report and return `""` if unset."""

        if self.data is None or self.model_type() is None:
            self.errors.report(ModelNotSetError())
            return ""
        if self.is_list:
            return self._naming.table_name(self.model_type())
        return self._naming.table_name(self.data)

    def primary_key(self) -> str:
        return PRIMARY_KEY

    def primary_key_db(self) -> str:
        return column_name(self.primary_key())

    def primary_key_value(self) -> int:
        """Integer primary key of the record; `-1` without a record.

        Lists, classes and non-integer keys report `0`.
        """

        if self.data is None:
            return -1
        if not self.is_record:
            return 0

        spec = record_schema(type(self.data)).field_for_column(self.primary_key_db())
        if spec is None:
            return 0
        value = getattr(self.data, spec.name, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return 0

    def primary_key_zero(self) -> bool:
        """Whether the record has no primary key assigned yet (`<= 0`)."""

        return self.primary_key_value() <= 0

    def fields(self, operation: str) -> List[FieldDescriptor]:
        """Classify the record's fields, memoized per operation name.

        `create` and `update` first autofill timestamp fields in place (see
        `apply_timestamps`); the autofill therefore runs once per operation
        name for the life of the handle.
        """

        cached = self._cache_fields.get(operation)
        if cached is not None:
            return cached

        if not self.is_record:
            if self.data is None:
                self.errors.report(ModelNotSetError())
            return []

        apply_timestamps(
            self.data,
            operation,
            clock=self.config.clock,
            errors=self.errors,
        )
        self._report_tag_errors()
        fields = describe_fields(
            self.data,
            dialect=self.dialect,
            max_depth=self.config.max_nesting_depth,
        )
        logger.debug(
            "classified %d fields of %s for %r",
            len(fields),
            self.type_name(),
            operation,
        )
        self._cache_fields[operation] = fields
        return fields

    def _report_tag_errors(self) -> None:
        """Report unparseable `sql` tags of the record type once per handle."""

        if self._tag_errors_reported:
            return
        self._tag_errors_reported = True
        for spec in record_schema(type(self.data)).fields:
            if spec.tag_error is not None:
                self.errors.report(spec.tag_error)

    def columns_with_value(self, operation: str) -> List[FieldDescriptor]:
        """Descriptors of fields holding a non-blank value."""

        return [field for field in self.fields(operation) if not field.is_blank]

    def columns_and_values(self, operation: str) -> ColumnValues:
        """Persisted, non-primary-key columns mapped to their current values."""

        results: ColumnValues = {}
        if self.data is None:
            return results
        for field in self.fields(operation):
            if not field.is_primary_key and field.sql_type:
                results[field.db_name] = field.value
        return results

    def apply_column_values(self, values: ColumnValuesInput) -> bool:
        """Assign column-keyed values onto the record; see `mutation`."""

        if not self.is_record:
            return apply_column_values(None, values, clock=self.config.clock)
        return apply_column_values(
            self.data,
            values,
            clock=self.config.clock,
            errors=self.errors,
        )

    def has_column(self, name: str) -> bool:
        """Whether the record type declares a field for `name`.

        `name` may be a field identifier (`UserId`) or a column (`user_id`).
        """

        model = self.model_type()
        if model is None:
            return False
        require_dataclass_model(model)
        return record_schema(model).field_for_column(name) is not None

    def column_and_value(self, name: str) -> Tuple[bool, bool, Any]:
        """Return `(has_column, is_list, value)` for one field.

        Lists only report whether their element type has the column.
        """

        has_column = self.has_column(name)
        if not self.is_record or not has_column:
            return has_column, self.is_list, None
        spec = record_schema(type(self.data)).field_for_column(name)
        return True, False, getattr(self.data, spec.name)

    def set_value_by_column(self, name: str, value: Any, out: Any) -> None:
        """Assign `value` to the field of `out` stored in column `name`.

        Columns `out` does not declare are ignored.
        """

        spec = record_schema(type(out)).field_for_column(name)
        if spec is not None:
            setattr(out, spec.name, value)

    def call_method(self, method: str) -> None:
        """Run a lifecycle hook (`before_create`, ...) declared on the record.

        An exception raised or returned by the hook is reported to the error
        sink. Nothing runs without a record or once errors were reported.
        """

        if self.data is None or self.errors.has_errors:
            return
        hook = getattr(self.data, method, None)
        if not callable(hook):
            return
        try:
            result = hook()
        except Exception as exc:  # noqa: BLE001
            self.errors.report(exc)
            return
        if isinstance(result, BaseException):
            self.errors.report(result)

    def before_associations(self) -> List[FieldDescriptor]:
        """Non-blank associations that must be persisted before the record."""

        return [
            field
            for field in self.fields(NULL)
            if field.is_before_association and not field.is_blank
        ]

    def after_associations(self) -> List[FieldDescriptor]:
        """Non-blank associations persisted once the record has its key."""

        return [
            field
            for field in self.fields(NULL)
            if field.is_after_association and not field.is_blank
        ]
