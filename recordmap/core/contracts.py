"""Core port contracts used by the field classifier and dialect adapters."""

from __future__ import annotations

from typing import Any, Protocol


class DialectPort(Protocol):
    """Dialect behavior required to tag persisted columns with a storage type."""

    name: str

    def sql_tag(self, sample: Any, size: int = 0) -> str: ...

    def primary_key_tag(self, sample: Any, size: int = 0) -> str: ...


class ErrorSink(Protocol):
    """Non-fatal error accumulation shared by one operation chain."""

    @property
    def has_errors(self) -> bool: ...

    def report(self, err: BaseException) -> None: ...
