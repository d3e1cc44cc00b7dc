"""Fluent query builder mirroring the PostgREST client API.

Chained calls only record state; nothing touches the store until the builder
is awaited or :meth:`QueryBuilder.run` is called::

    result = await store.from_("leads").select().eq("status", "new").order("score", ascending=False).limit(10)
    if result.error is None:
        leads = result.data
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Generator, Generic, Iterable, Mapping, TypeVar

from mock_tables.parsing.filter_parser import parse_or_filter
from mock_tables.predicates import Condition, Predicate
from mock_tables.query import COUNT_MODES, Ordering, Query
from mock_tables.query_executor import QueryExecutor, QueryResult

if TYPE_CHECKING:
    from mock_tables.store import MockStore

RecordT = TypeVar("RecordT", bound=Mapping[str, Any])


class QueryBuilder(Generic[RecordT]):
    """Accumulates one operation on a table and executes it on demand.

    Each await (or :meth:`run`) executes the query again, so awaiting an
    insert builder twice inserts twice.
    """

    def __init__(self, table: str, store: MockStore) -> None:
        self.store = store
        self.query = Query(table=table)

    # --- Operations ---

    def select(self, columns: str = "*", *, count: str | None = None, head: bool = False) -> QueryBuilder[RecordT]:
        """Read rows, or return the affected rows of a preceding mutation.

        Args:
            columns: Column list; accepted for compatibility, not enforced.
            count: Count mode (``exact``, ``planned`` or ``estimated``).
            head: Return only the count, with ``data`` set to None.
        """
        if count is not None and count not in COUNT_MODES:
            raise ValueError(f"count must be one of {COUNT_MODES}, got {count!r}")
        self.query.columns = columns
        self.query.count = count
        self.query.head = head
        return self

    def insert(self, data: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> QueryBuilder[RecordT]:
        self.query.operation = "insert"
        self.query.rows = _as_rows(data)
        return self

    def update(self, data: Mapping[str, Any]) -> QueryBuilder[RecordT]:
        self.query.operation = "update"
        self.query.changes = data
        return self

    def delete(self) -> QueryBuilder[RecordT]:
        self.query.operation = "delete"
        return self

    def upsert(
        self, data: Mapping[str, Any] | Iterable[Mapping[str, Any]], *, on_conflict: str = "id"
    ) -> QueryBuilder[RecordT]:
        """Insert rows, or update the rows that share the conflict key.

        Args:
            data: One row or a list of rows; each is resolved independently.
            on_conflict: Comma-separated columns identifying a row.
        """
        columns = tuple(column.strip() for column in on_conflict.split(",") if column.strip())
        if not columns:
            raise ValueError("on_conflict must name at least one column")
        self.query.operation = "upsert"
        self.query.rows = _as_rows(data)
        self.query.on_conflict = columns
        return self

    # --- Filters ---

    def eq(self, column: str, value: Any) -> QueryBuilder[RecordT]:
        return self._add_filter(Condition(column, "eq", value))

    def neq(self, column: str, value: Any) -> QueryBuilder[RecordT]:
        return self._add_filter(Condition(column, "neq", value))

    def gt(self, column: str, value: Any) -> QueryBuilder[RecordT]:
        return self._add_filter(Condition(column, "gt", value))

    def gte(self, column: str, value: Any) -> QueryBuilder[RecordT]:
        return self._add_filter(Condition(column, "gte", value))

    def lt(self, column: str, value: Any) -> QueryBuilder[RecordT]:
        return self._add_filter(Condition(column, "lt", value))

    def lte(self, column: str, value: Any) -> QueryBuilder[RecordT]:
        return self._add_filter(Condition(column, "lte", value))

    def like(self, column: str, pattern: str) -> QueryBuilder[RecordT]:
        """Match ``pattern`` with ``%`` wildcards, ignoring case."""
        if not isinstance(pattern, str):
            raise TypeError(f"like pattern must be a string, got {type(pattern).__name__}")
        return self._add_filter(Condition(column, "like", pattern))

    def ilike(self, column: str, pattern: str) -> QueryBuilder[RecordT]:
        """Same as :meth:`like`; both ignore case."""
        if not isinstance(pattern, str):
            raise TypeError(f"ilike pattern must be a string, got {type(pattern).__name__}")
        return self._add_filter(Condition(column, "ilike", pattern))

    def is_(self, column: str, value: bool | None) -> QueryBuilder[RecordT]:
        if value is not None and value is not True and value is not False:
            raise ValueError(f"is_ accepts None, True or False, got {value!r}")
        return self._add_filter(Condition(column, "is", value))

    def in_(self, column: str, values: Iterable[Any]) -> QueryBuilder[RecordT]:
        if isinstance(values, (str, bytes)):
            raise TypeError("in_ expects a collection of values, not a string")
        return self._add_filter(Condition(column, "in", tuple(values)))

    def contains(self, column: str, value: Any) -> QueryBuilder[RecordT]:
        """Keep rows whose array (or json) column includes every given element."""
        return self._add_filter(Condition(column, "contains", value))

    def contained_by(self, column: str, values: Any) -> QueryBuilder[RecordT]:
        """Keep rows whose array (or json) column holds nothing outside ``values``."""
        return self._add_filter(Condition(column, "contained_by", values))

    def or_(self, filters: str) -> QueryBuilder[RecordT]:
        """Keep rows matching any ``column.op.value`` term of ``filters``.

        Only ``eq`` and ``neq`` are understood and values compare as text.
        Terms that use another operator or do not parse match nothing.
        """
        return self._add_filter(parse_or_filter(filters))

    def _add_filter(self, predicate: Predicate) -> QueryBuilder[RecordT]:
        self.query.filters.append(predicate)
        return self

    # --- Shaping ---

    def order(self, column: str, *, ascending: bool = True, desc: bool | None = None) -> QueryBuilder[RecordT]:
        """Sort by one column, replacing any earlier ordering."""
        if desc is not None:
            ascending = not desc
        self.query.ordering = Ordering(column=column, ascending=ascending)
        return self

    def limit(self, count: int) -> QueryBuilder[RecordT]:
        if count < 0:
            raise ValueError(f"limit must not be negative, got {count}")
        self.query.limit = count
        return self

    def range(self, start: int, end: int) -> QueryBuilder[RecordT]:
        """Return rows ``start`` through ``end``, both inclusive."""
        if start < 0:
            raise ValueError(f"range start must not be negative, got {start}")
        self.query.offset = start
        self.query.limit = max(0, end - start + 1)
        return self

    def single(self) -> QueryBuilder[RecordT]:
        """Return the first row as ``data`` (None if there is none)."""
        self.query.shape = "single"
        return self

    def maybe_single(self) -> QueryBuilder[RecordT]:
        """Same as :meth:`single`; more than one match is not an error."""
        self.query.shape = "maybe_single"
        return self

    # --- Execution ---

    def run(self) -> QueryResult:
        """Execute the query synchronously, without simulated latency."""
        return QueryExecutor(self.store).execute(self.query)

    async def execute(self) -> QueryResult:
        """Execute the query after the configured artificial latency."""
        latency = self.store.config.latency_seconds
        if latency > 0:
            await asyncio.sleep(latency)
        return self.run()

    def __await__(self) -> Generator[Any, None, QueryResult]:
        return self.execute().__await__()

    def __repr__(self) -> str:
        return f"QueryBuilder(table={self.query.table!r}, operation={self.query.operation!r})"


def _as_rows(data: Any) -> list[Any]:
    # Non-mapping rows are rejected when the query executes
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]
