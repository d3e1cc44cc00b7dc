"""Data store owning every mock table in a process."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, TypeVar

from mock_tables.config import MockTablesConfig
from mock_tables.query_builder import QueryBuilder
from mock_tables.table import Table

RecordT = TypeVar("RecordT", bound=Mapping[str, Any])

Seeder = Callable[["MockStore"], None]


class MockStore:
    """Owns named tables and exposes raw CRUD primitives.

    The store has no query semantics of its own; filtering, ordering and
    pagination live in the query builder returned by :meth:`from_`.
    """

    def __init__(self, config: MockTablesConfig | None = None) -> None:
        """Initialize an empty store.

        Args:
            config: Runtime configuration. Defaults to no latency and no
                operation logging.
        """
        self.config = config or MockTablesConfig()
        self._tables: dict[str, Table] = {}

    # --- Query entry points ---

    def from_(self, name: str, record_type: type[RecordT] | None = None) -> QueryBuilder[RecordT]:
        """Return a new query builder for table ``name``.

        ``record_type`` only narrows the static type of returned records.
        """
        self._check_table_name(name)
        return QueryBuilder(name, self)

    def table(self, name: str, record_type: type[RecordT] | None = None) -> QueryBuilder[RecordT]:
        """Alias of :meth:`from_`."""
        return self.from_(name, record_type)

    # --- Raw table access ---

    def get_table(self, name: str) -> Table:
        """Return the table for ``name``, creating it if absent."""
        self._check_table_name(name)
        table = self._tables.get(name)
        if table is None:
            table = Table(name)
            self._tables[name] = table
        return table

    def get_all(self, name: str) -> list[dict[str, Any]]:
        """Return a snapshot of every record in ``name``."""
        return self.get_table(name).snapshot()

    def get(self, name: str, record_id: str) -> dict[str, Any] | None:
        """Return one record by id, or None if it does not exist."""
        return self.get_table(name).get(record_id)

    def insert(self, name: str, record: dict[str, Any]) -> str:
        """Store a record by id, overwriting any record with the same id."""
        return self.get_table(name).insert(record)

    def update(self, name: str, record_id: str, record: dict[str, Any]) -> None:
        """Replace a record; does nothing if ``record_id`` is absent."""
        self.get_table(name).update(record_id, record)

    def delete(self, name: str, record_id: str) -> None:
        """Remove a record; does nothing if ``record_id`` is absent."""
        self.get_table(name).delete(record_id)

    def clear(self, name: str | None = None) -> None:
        """Drop one table, or every table when ``name`` is None."""
        if name is None:
            self._tables.clear()
        else:
            self._tables.pop(name, None)

    def seed(self, name: str, records: Iterable[dict[str, Any]]) -> int:
        """Insert raw records as-is and return how many were stored."""
        table = self.get_table(name)
        stored = 0
        for record in records:
            table.insert(record)
            stored += 1
        return stored

    # --- Introspection ---

    def count(self, name: str) -> int:
        """Return the number of records in ``name`` (0 for unknown tables)."""
        table = self._tables.get(name)
        return table.count if table is not None else 0

    def table_names(self) -> list[str]:
        """Return the names of all tables created so far."""
        return list(self._tables)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    @staticmethod
    def _check_table_name(name: object) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError(f"Table name must be a non-empty string, got {name!r}")


# --- Process-wide default store ---

_default_store: MockStore | None = None
_seeder: Seeder | None = None


def set_seeder(seeder: Seeder | None) -> None:
    """Register the function that populates the default store on creation.

    The seeder runs the next time :func:`get_store` builds a store; an
    already constructed store is left untouched.
    """
    global _seeder
    _seeder = seeder


def get_store() -> MockStore:
    """Return the process-wide store, constructing and seeding it on first use."""
    global _default_store
    if _default_store is None:
        store = MockStore(MockTablesConfig.from_env())
        if _seeder is not None:
            _seeder(store)
        _default_store = store
    return _default_store


def reset_store() -> None:
    """Discard the process-wide store so the next access builds a fresh one."""
    global _default_store
    _default_store = None
