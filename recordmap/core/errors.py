"""Error types and the accumulating error sink."""

from __future__ import annotations

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class RecordMapError(ValueError):
    """Base error for record mapping problems caused by caller data."""


class ModelNotSetError(RecordMapError):
    """Raised (or reported) when an operation needs a record but none is set."""

    def __init__(self, message: str = "Model haven't been set") -> None:
        super().__init__(message)


class SqlTagError(RecordMapError):
    """Raised when a field `sql` metadata tag cannot be parsed."""


class ErrorCollector:
    """Collect non-fatal errors reported while mapping a record.

    Classification never raises for bad caller input. Problems are reported
    here so the calling chain can inspect them once the operation is done.
    """

    def __init__(self) -> None:
        self.errors: List[BaseException] = []

    def report(self, err: BaseException) -> None:
        logger.warning("record mapping error: %s", err)
        self.errors.append(err)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error(self) -> Optional[BaseException]:
        """Most recently reported error, if any."""

        return self.errors[-1] if self.errors else None

    def raise_first(self) -> None:
        """Re-raise the first reported error, if any."""

        if self.errors:
            raise self.errors[0]
