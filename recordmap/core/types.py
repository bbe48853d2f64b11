"""Shared core type aliases and operation names."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

ColumnValues = Dict[str, Any]
ColumnValuesInput = Mapping[str, Any]
Clock = Callable[[], Any]

CREATE = "create"
UPDATE = "update"
NULL = "null"
