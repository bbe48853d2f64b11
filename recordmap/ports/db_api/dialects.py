"""Concrete SQL dialects resolving column storage type tags."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, get_origin
from uuid import UUID


class Dialect:
    """Base dialect mapping Python values to generic SQL column types."""

    name: str = "generic"

    def sql_tag(self, sample: Any, size: int = 0) -> str:
        """Return the column type for a representative value or type."""

        base = _sample_type(sample)
        if base is None:
            return self.text_type(size)
        if issubclass(base, bool):
            return "BOOLEAN"
        if issubclass(base, datetime):
            return "TIMESTAMP"
        if issubclass(base, date):
            return "DATE"
        if issubclass(base, time):
            return "TIME"
        if issubclass(base, timedelta):
            return "INTERVAL"
        if issubclass(base, Decimal):
            return "NUMERIC"
        if issubclass(base, (bytes, bytearray, memoryview)):
            return "BLOB"
        if issubclass(base, Enum):
            return self.text_type(size)
        if issubclass(base, int):
            return self.int_type()
        if issubclass(base, float):
            return "REAL"
        if issubclass(base, UUID):
            return self.text_type(size or 36)
        if issubclass(base, (dict, list, tuple, set, frozenset)):
            return self.json_type()
        return self.text_type(size)

    def primary_key_tag(self, sample: Any, size: int = 0) -> str:
        """Return the column type of an auto-increment primary key."""

        return "INTEGER PRIMARY KEY"

    def int_type(self) -> str:
        return "INTEGER"

    def json_type(self) -> str:
        return "TEXT"

    def text_type(self, size: int = 0) -> str:
        if size > 0:
            return f"VARCHAR({size})"
        return "TEXT"


class SQLiteDialect(Dialect):
    """SQLite dialect (`INTEGER PRIMARY KEY` aliases the rowid)."""

    name = "sqlite"

    def sql_tag(self, sample: Any, size: int = 0) -> str:
        base = _sample_type(sample)
        if base is not None and issubclass(base, timedelta):
            return "REAL"
        return super().sql_tag(sample, size)

    def primary_key_tag(self, sample: Any, size: int = 0) -> str:
        return "INTEGER PRIMARY KEY AUTOINCREMENT"


class PostgresDialect(Dialect):
    """PostgreSQL dialect."""

    name = "postgres"

    def sql_tag(self, sample: Any, size: int = 0) -> str:
        base = _sample_type(sample)
        if base is not None:
            if issubclass(base, datetime):
                return "TIMESTAMP WITH TIME ZONE"
            if issubclass(base, (bytes, bytearray, memoryview)):
                return "BYTEA"
            if issubclass(base, float):
                return "DOUBLE PRECISION"
            if issubclass(base, UUID):
                return "UUID"
        return super().sql_tag(sample, size)

    def primary_key_tag(self, sample: Any, size: int = 0) -> str:
        return "SERIAL PRIMARY KEY"

    def int_type(self) -> str:
        return "BIGINT"

    def json_type(self) -> str:
        return "JSONB"


class MySQLDialect(Dialect):
    """MySQL dialect (sized `VARCHAR` text columns)."""

    name = "mysql"

    def sql_tag(self, sample: Any, size: int = 0) -> str:
        base = _sample_type(sample)
        if base is not None:
            if issubclass(base, datetime):
                return "DATETIME"
            if issubclass(base, float):
                return "DOUBLE"
            if issubclass(base, timedelta):
                return "TIME"
        return super().sql_tag(sample, size)

    def primary_key_tag(self, sample: Any, size: int = 0) -> str:
        return "INT NOT NULL AUTO_INCREMENT PRIMARY KEY"

    def int_type(self) -> str:
        return "BIGINT"

    def json_type(self) -> str:
        return "JSON"

    def text_type(self, size: int = 0) -> str:
        return f"VARCHAR({size or 255})"


def _sample_type(sample: Any) -> type | None:
    """Type of a sample value, or the sample itself when it is a type."""

    if sample is None:
        return None
    origin = get_origin(sample)
    if isinstance(origin, type):
        return origin
    if isinstance(sample, type):
        return sample
    return type(sample)
