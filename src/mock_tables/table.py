"""In-memory storage for a single named table."""

from __future__ import annotations

from typing import Any

from mock_tables.records import new_record_id


class Table:
    """Identity-keyed collection of records.

    Records are kept in a dict keyed by ``id``; snapshots follow dict order,
    so an overwritten id keeps its original slot and a re-inserted id moves
    to the end.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._records: dict[str, dict[str, Any]] = {}

    @property
    def count(self) -> int:
        """Return the number of records in the table."""
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def snapshot(self) -> list[dict[str, Any]]:
        """Return shallow copies of all records in storage order."""
        return [dict(record) for record in self._records.values()]

    def get(self, record_id: str) -> dict[str, Any] | None:
        """Return a copy of the record with ``record_id``, or None."""
        record = self._records.get(record_id)
        if record is None:
            return None
        return dict(record)

    def insert(self, record: dict[str, Any]) -> str:
        """Store a record under its ``id``, synthesizing one if missing.

        An existing record with the same id is replaced.

        Returns:
            The id the record was stored under.
        """
        record_id = record.get("id") or new_record_id()
        self._records[record_id] = {**record, "id": record_id}
        return record_id

    def update(self, record_id: str, record: dict[str, Any]) -> bool:
        """Replace the record stored under ``record_id``.

        Returns:
            False if no record has that id; nothing is stored in that case.
        """
        if record_id not in self._records:
            return False
        self._records[record_id] = dict(record)
        return True

    def delete(self, record_id: str) -> bool:
        """Remove the record stored under ``record_id`` if present."""
        return self._records.pop(record_id, None) is not None
