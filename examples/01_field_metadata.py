"""Show derived column metadata for a record across SQL dialects."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "recordmap").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from recordmap import ErrorCollector, RecordModel
from recordmap.ports.db_api.dialects import MySQLDialect, PostgresDialect, SQLiteDialect


@dataclass
class Profile:
    id: int = 0
    bio: str = ""


@dataclass
class Post:
    id: int = 0
    author_id: int = 0
    title: str = field(default="", metadata={"sql": "size:200;not null"})


@dataclass
class Author:
    id: int = 0
    name: str = ""
    profile: Optional[Profile] = None
    profile_id: int = 0
    posts: list[Post] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def show_for_dialect(name: str, dialect) -> None:  # noqa: ANN001
    print(f"\n===== {name} =====")

    author = Author(name="Ada", profile=Profile(bio="math"), posts=[Post(title="Notes")])
    errors = ErrorCollector()
    model = RecordModel(author, dialect=dialect, errors=errors)

    print("Table:", model.table_name())
    for column in model.fields("create"):
        print(f"  {column.db_name:<12} {column.sql_type or '-':<40} blank={column.is_blank}")
    print("Insert values:", model.columns_and_values("create"))
    print("Before:", [(f.name, f.foreign_key) for f in model.before_associations()])
    print("After:", [(f.name, f.foreign_key) for f in model.after_associations()])
    print("Errors:", errors.errors)


def main() -> None:
    show_for_dialect("SQLiteDialect", SQLiteDialect())
    show_for_dialect("PostgresDialect", PostgresDialect())
    show_for_dialect("MySQLDialect", MySQLDialect())


if __name__ == "__main__":
    main()
