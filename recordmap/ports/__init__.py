"""Public port exports for concrete adapter implementations."""

from .db_api import Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
]
