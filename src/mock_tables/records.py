"""Identity and timestamp helpers for stored records."""

from __future__ import annotations

import uuid as uuid_module
from datetime import datetime, timezone
from typing import Any, Mapping


def new_record_id() -> str:
    """Return a fresh random record id in canonical UUID form."""
    return str(uuid_module.uuid4())


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def stamp_new_record(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Build a record ready for insertion.

    Synthesized ``id``, ``created_at`` and ``updated_at`` are overridden by
    caller fields, except that an explicit ``id`` of ``None`` is replaced.
    """
    now = utc_timestamp()
    record: dict[str, Any] = {
        "id": new_record_id(),
        "created_at": now,
        "updated_at": now,
    }
    record.update(fields)
    if record["id"] is None:
        record["id"] = new_record_id()
    return record


def merge_record(existing: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow-merge ``changes`` over ``existing`` and refresh ``updated_at``."""
    merged = dict(existing)
    merged.update(changes)
    merged["updated_at"] = utc_timestamp()
    return merged
