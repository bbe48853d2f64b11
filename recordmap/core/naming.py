"""Identifier casing and table-name inference for record types."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, fields
from typing import Any, Optional, Tuple

# Ordered suffix substitutions, first match wins.
PLURAL_RULES: Tuple[Tuple[str, str], ...] = (
    ("ch", "ches"),
    ("ss", "sses"),
    ("sh", "shes"),
    ("day", "days"),
    ("y", "ies"),
    ("x", "xes"),
    ("s", "ses"),
)


def to_snake_case(identifier: str) -> str:
    """Convert `PascalCase`/`camelCase` identifiers to `snake_case`.

    An underscore is inserted only where a lowercase letter or digit is
    followed by an uppercase letter, so acronym runs stay together:
    `CreatedAt -> created_at`, `UserID -> user_id`, `HTTPServer -> httpserver`.
    Already snake-cased input is returned unchanged.
    """

    chars = []
    previous = ""
    for char in identifier:
        if char.isupper() and (previous.islower() or previous.isdigit()):
            chars.append("_")
        chars.append(char)
        previous = char
    return "".join(chars).lower()


def to_pascal_case(snake_name: str) -> str:
    """Convert a `snake_case` column name to a `PascalCase` identifier."""

    return "".join(part[:1].upper() + part[1:] for part in snake_name.split("_") if part)


def pluralize(name: str) -> str:
    """Pluralize a singular snake_case table name."""

    for suffix, replacement in PLURAL_RULES:
        if name.endswith(suffix):
            return name[: -len(suffix)] + replacement
    return f"{name}s"


def column_name(identifier: str) -> str:
    """Column name a declared field identifier is stored in."""

    return to_snake_case(identifier)


def attribute_for_column(cls: type, column: str) -> Optional[str]:
    """Declared exported field of dataclass `cls` stored in `column`.

    `column` may be the field identifier itself, its snake_case column, or
    the snake_case form of a `PascalCase` identifier (`name -> Name`).
    """

    names = [f.name for f in fields(cls) if not f.name.startswith("_")]
    for candidate in (column, to_pascal_case(column)):
        if candidate in names:
            return candidate
    target = column_name(column)
    for name in names:
        if column_name(name) == target:
            return name
    return None


@dataclass(frozen=True)
class NamingResolver:
    """Resolve table names using an explicit pluralization setting."""

    pluralize_tables: bool = True

    def table_name(self, model_or_cls: Any) -> str:
        """Resolve table name from a record, record class, or list of records.

        Uses the record's name override (`__table__` attribute or a
        `table_name()` method) verbatim when present, otherwise the snake
        cased type name, pluralized when configured.
        """

        obj, cls = _record_and_type(model_or_cls)
        override = custom_table_name(obj, cls)
        if override is not None:
            return override

        name = to_snake_case(cls.__name__)
        if self.pluralize_tables:
            return pluralize(name)
        return name


def custom_table_name(obj: Any, cls: type) -> Optional[str]:
    """Return a record type's own table name, if it declares one."""

    name = getattr(cls, "__table__", None)
    if isinstance(name, str) and name:
        return name

    static = inspect.getattr_static(cls, "table_name", None)
    if static is None:
        return None
    if obj is None and not isinstance(static, (classmethod, staticmethod)):
        return None

    method = getattr(obj if obj is not None else cls, "table_name")
    if not callable(method):
        return None
    result = method()
    return result if isinstance(result, str) and result else None


def _record_and_type(model_or_cls: Any) -> Tuple[Any, type]:
    if isinstance(model_or_cls, type):
        return None, model_or_cls
    if isinstance(model_or_cls, (list, tuple)):
        if model_or_cls:
            return None, type(model_or_cls[0])
        raise TypeError("Cannot resolve a record type from an empty sequence.")
    return model_or_cls, type(model_or_cls)
