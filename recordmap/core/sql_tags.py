"""Parsing of per-field `sql` metadata tags."""

from __future__ import annotations

from dataclasses import Field, dataclass
from typing import Any

from .errors import SqlTagError

SKIP = "-"
MODIFIERS = ("NOT NULL", "UNIQUE")


@dataclass(frozen=True)
class SqlTag:
    """Explicit column type override declared on a field."""

    type: str = ""
    modifiers: str = ""
    size: int = 0

    @property
    def skip(self) -> bool:
        return self.type == SKIP


EMPTY_TAG = SqlTag()


def parse_sql_tag(raw: Any) -> SqlTag:
    """Parse `field.metadata['sql']` into `(type, modifiers, size)`.

    Format: `"type:varchar(64);size:64;not null;unique"`. A bare token that
    is not a modifier is taken as the type. The literal `"-"` marks a field
    that is never persisted.

    Raises:
        SqlTagError: If the tag is not a string or has an invalid size.
    """

    if raw is None or raw == "":
        return EMPTY_TAG
    if not isinstance(raw, str):
        raise SqlTagError(f"sql tag must be a string, got {type(raw).__name__}.")
    if raw.strip() == SKIP:
        return SqlTag(type=SKIP)

    parts: dict[str, str] = {}
    bare: list[str] = []
    for token in raw.split(";"):
        if not token.strip():
            continue
        key, sep, value = token.partition(":")
        key = key.strip().upper()
        if sep:
            parts[key] = value.strip()
        elif key in MODIFIERS:
            parts[key] = key
        else:
            bare.append(token.strip())

    size = 0
    if parts.get("SIZE"):
        try:
            size = int(parts["SIZE"])
        except ValueError as exc:
            raise SqlTagError(f"Invalid sql tag size {parts['SIZE']!r}.") from exc
        if size < 0:
            raise SqlTagError(f"sql tag size must be >= 0, got {size}.")

    typ = parts.get("TYPE") or (bare[0] if bare else "")
    modifiers = " ".join(parts[key] for key in MODIFIERS if key in parts)
    return SqlTag(type=typ, modifiers=modifiers, size=size)


def field_sql_tag(field: Field[Any]) -> SqlTag:
    """Return the parsed tag of a dataclass field, or an empty tag."""

    return parse_sql_tag(field.metadata.get("sql"))
