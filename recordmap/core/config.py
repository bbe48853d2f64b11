"""Mapper configuration passed explicitly to each record handle."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .naming import NamingResolver

DEFAULT_MAX_NESTING_DEPTH = 32


@dataclass(frozen=True)
class MapperConfig:
    """Settings shared by every handle created for one mapping chain.

    Attributes:
        pluralize_tables: Pluralize inferred table names (`user -> users`).
        clock: Source of "now" used by timestamp autofill.
        max_nesting_depth: Recursion limit for nested record blank checks.
    """

    pluralize_tables: bool = True
    clock: Callable[[], datetime] = datetime.now
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH

    def __post_init__(self) -> None:
        if not callable(self.clock):
            raise TypeError("MapperConfig.clock must be callable.")
        if not isinstance(self.max_nesting_depth, int) or self.max_nesting_depth < 1:
            raise ValueError("MapperConfig.max_nesting_depth must be a positive integer.")

    def naming(self) -> NamingResolver:
        return NamingResolver(pluralize_tables=self.pluralize_tables)


DEFAULT_CONFIG = MapperConfig()
