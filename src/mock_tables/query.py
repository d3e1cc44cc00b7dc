"""Declarative description of one query accumulated by the builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from mock_tables.predicates import Predicate

COUNT_MODES = ("exact", "planned", "estimated")


@dataclass
class Ordering:
    """The single sort key of a query."""

    column: str
    ascending: bool = True


@dataclass
class Query:
    """A query against one table.

    ``filters`` are ANDed. ``offset`` and ``limit`` are applied after
    filtering and ordering.
    """

    table: str
    operation: str = "select"  # select, insert, update, delete or upsert
    filters: list[Predicate] = field(default_factory=list)
    ordering: Ordering | None = None
    limit: int | None = None
    offset: int = 0
    columns: str = "*"  # accepted, not enforced
    rows: list[Any] = field(default_factory=list)  # insert/upsert payload
    changes: Mapping[str, Any] | None = None  # update payload
    count: str | None = None  # one of COUNT_MODES
    head: bool = False
    on_conflict: tuple[str, ...] = ("id",)
    shape: str = "many"  # many, single or maybe_single
