from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterator, Optional

from recordmap import Nullable

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0)


def ticking_clock(start: datetime = FIXED_NOW) -> Iterator[datetime]:
    current = start
    while True:
        yield current
        current += timedelta(seconds=1)


def clock_from(ticks: Iterator[datetime]):  # noqa: ANN201
    return lambda: next(ticks)


@dataclass
class Email:
    id: int = 0
    user_id: int = 0
    email: str = ""


@dataclass
class Address:
    id: int = 0
    street: str = ""
    user_id: int = 0


@dataclass
class CreditCard:
    id: int = 0
    number: str = ""


@dataclass
class User:
    id: int = 0
    name: str = ""
    age: int = 0
    nickname: Nullable[str] = field(default_factory=Nullable)
    emails: list[Email] = field(default_factory=list)
    billing_address: Optional[Address] = None
    billing_address_id: int = 0
    shipping_address: Optional[Address] = None
    credit_card: Optional[CreditCard] = None
    password: str = field(default="", metadata={"sql": "-"})
    bio: str = field(default="", metadata={"sql": "type:varchar(500);not null"})
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    _token: str = ""


@dataclass
class LegacyRow:
    Id: int = 0
    Name: str = ""
    UpdatedAt: Optional[datetime] = None


@dataclass
class Node:
    name: str = ""
    parent: Optional[Node] = None


class Opaque:
    pass


@dataclass
class LooseRecord:
    id: Any = 0
    created_at: Any = None
    payload: Any = None
    child: Any = None
    handle: Opaque = field(default_factory=Opaque)


@dataclass
class BadTagRecord:
    id: int = 0
    code: str = field(default="", metadata={"sql": "size:big"})
    title: str = field(default="", metadata={"sql": "size:120"})


@dataclass(frozen=True)
class FrozenStamp:
    id: int = 0
    name: str = ""
    created_at: Optional[datetime] = None


@dataclass
class Category:
    id: int = 0
    name: str = ""


@dataclass
class Box:
    id: int = 0


@dataclass
class CustomTable:
    __table__ = "custom_things"
    id: int = 0


@dataclass
class MethodNamed:
    id: int = 0
    tenant: str = "acme"

    def table_name(self) -> str:
        return f"{self.tenant}_records"


@dataclass
class ClassNamed:
    id: int = 0

    @classmethod
    def table_name(cls) -> str:
        return "named_by_class"


@dataclass
class Hooked:
    id: int = 0
    _calls: int = 0

    def before_save(self) -> None:
        self._calls += 1

    def before_delete(self) -> Exception:
        return ValueError("record is locked")

    def after_find(self) -> None:
        raise RuntimeError("hook failed")
