"""Query executor for mock table queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Hashable, Mapping

from mock_tables.errors import InvalidPayloadError, QueryExecutionError
from mock_tables.logging_config import get_logger
from mock_tables.predicates import matches_all, values_equal
from mock_tables.query import Ordering, Query
from mock_tables.records import merge_record, stamp_new_record

if TYPE_CHECKING:
    from mock_tables.store import MockStore

logger = get_logger(__name__)


@dataclass
class QueryResult:
    """Result envelope of every query.

    ``data`` is a list of records, a single record, or None. Failures are
    reported in ``error`` instead of being raised.
    """

    data: Any
    error: Exception | None = None
    count: int | None = None


class QueryExecutor:
    """Executes one query against a store."""

    def __init__(self, store: MockStore) -> None:
        self.store = store

    def execute(self, query: Query) -> QueryResult:
        """Execute a query and return its result envelope."""
        if self.store.config.log_operations:
            logger.info(
                "mock_query",
                table=query.table,
                operation=query.operation,
                filters=len(query.filters),
                limit=query.limit,
            )

        try:
            rows, count = self._dispatch(query)
        except Exception as error:
            if self.store.config.log_operations:
                logger.warning(
                    "mock_query_failed",
                    table=query.table,
                    operation=query.operation,
                    error=repr(error),
                )
            return QueryResult(data=[] if query.shape == "many" else None, error=error)

        if query.operation != "select" and query.count is None:
            count = None

        if query.head:
            return QueryResult(data=None, count=count)
        if query.shape != "many":
            return QueryResult(data=rows[0] if rows else None, count=count)
        return QueryResult(data=rows, count=count)

    def _dispatch(self, query: Query) -> tuple[list[dict[str, Any]], int]:
        if query.operation == "select":
            return self._execute_select(query)
        elif query.operation == "insert":
            rows = self._execute_insert(query)
        elif query.operation == "update":
            rows = self._execute_update(query)
        elif query.operation == "delete":
            rows = self._execute_delete(query)
        elif query.operation == "upsert":
            rows = self._execute_upsert(query)
        else:
            raise QueryExecutionError(f"Unknown operation: {query.operation!r}")
        return rows, len(rows)

    # --- Reads ---

    def _matching(self, query: Query) -> list[dict[str, Any]]:
        """Return the records of the query's table that pass every filter."""
        return [
            record
            for record in self.store.get_all(query.table)
            if matches_all(record, query.filters)
        ]

    def _execute_select(self, query: Query) -> tuple[list[dict[str, Any]], int]:
        rows = _sort_records(self._matching(query), query.ordering)
        count = len(rows)
        return _paginate(rows, query.offset, query.limit), count

    # --- Writes ---

    def _execute_insert(self, query: Query) -> list[dict[str, Any]]:
        payload = [_require_row(item) for item in query.rows]
        inserted = []
        for fields in payload:
            record = stamp_new_record(fields)
            self.store.insert(query.table, record)
            inserted.append(record)
        return inserted

    def _execute_update(self, query: Query) -> list[dict[str, Any]]:
        changes = _require_row(query.changes)
        planned = [
            (existing["id"], merge_record(existing, changes))
            for existing in self._matching(query)
        ]
        for old_id, record in planned:
            if record.get("id") != old_id:
                # Re-keyed: store under the new id before dropping the old one
                record["id"] = self.store.insert(query.table, record)
                self.store.delete(query.table, old_id)
            else:
                self.store.update(query.table, old_id, record)
        return [record for _, record in planned]

    def _execute_delete(self, query: Query) -> list[dict[str, Any]]:
        deleted = self._matching(query)
        for record in deleted:
            self.store.delete(query.table, record["id"])
        return deleted

    def _execute_upsert(self, query: Query) -> list[dict[str, Any]]:
        payload = [_require_row(item) for item in query.rows]
        upserted = []
        for fields in payload:
            existing = self._find_conflict(query.table, fields, query.on_conflict)
            if existing is not None:
                record = merge_record(existing, fields)
                record["id"] = existing["id"]
                self.store.update(query.table, existing["id"], record)
            else:
                record = stamp_new_record(fields)
                self.store.insert(query.table, record)
            upserted.append(record)
        return upserted

    def _find_conflict(
        self, table: str, fields: Mapping[str, Any], on_conflict: tuple[str, ...]
    ) -> dict[str, Any] | None:
        """Return the stored record sharing the conflict key with ``fields``."""
        if any(fields.get(column) is None for column in on_conflict):
            return None
        if on_conflict == ("id",):
            return self.store.get(table, fields["id"])
        for record in self.store.get_all(table):
            if all(values_equal(record.get(column), fields[column]) for column in on_conflict):
                return record
        return None


def _require_row(item: Any) -> Mapping[str, Any]:
    """Check that a payload row is a mapping whose ``id`` can key a table."""
    if not isinstance(item, Mapping):
        raise InvalidPayloadError(
            f"Expected a mapping of column names to values, got {type(item).__name__}"
        )
    if not isinstance(item.get("id"), Hashable):
        raise InvalidPayloadError(
            f"Record id must be hashable, got {type(item['id']).__name__}"
        )
    return item


def _sort_records(rows: list[dict[str, Any]], ordering: Ordering | None) -> list[dict[str, Any]]:
    """Stable sort on one column with None (or missing) values always last."""
    if ordering is None:
        return rows
    column = ordering.column
    present = [row for row in rows if row.get(column) is not None]
    missing = [row for row in rows if row.get(column) is None]
    present.sort(key=lambda row: row[column], reverse=not ordering.ascending)
    return present + missing


def _paginate(rows: list[dict[str, Any]], offset: int, limit: int | None) -> list[dict[str, Any]]:
    if offset > 0:
        rows = rows[offset:]
    if limit is not None:
        rows = rows[:limit]
    return rows
