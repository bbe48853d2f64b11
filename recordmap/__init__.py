"""Map dataclass records to table columns by structural inspection."""

import logging

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .ports.db_api import Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    *_core_all,
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
]
