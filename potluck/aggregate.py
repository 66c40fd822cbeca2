"""Filtering, ordering and serialization over dish record collections.

Every function returns a new list; the input sequence is never mutated.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Iterable, Sequence

from potluck.models import DishRecord, FilterSpec


def search_haystack(record: DishRecord) -> str:
    """Lower-cased text a search query is matched against."""
    parts = [
        record.dish_name,
        record.guest_name,
        "vegan" if record.is_vegan else "",
        "gluten free" if record.is_gluten_free else "",
        "lactose free" if record.is_lactose_free else "",
    ]
    return " ".join(parts).lower()


def matches(record: DishRecord, spec: FilterSpec) -> bool:
    if spec.only_vegan and not record.is_vegan:
        return False
    if spec.only_gluten_free and not record.is_gluten_free:
        return False
    if spec.only_lactose_free and not record.is_lactose_free:
        return False

    query = spec.search_text.strip().lower()
    if query and query not in search_haystack(record):
        return False
    return True


def filter_records(records: Iterable[DishRecord], spec: FilterSpec) -> list[DishRecord]:
    """Keep records passing every active filter, in input order."""
    return [record for record in records if matches(record, spec)]


def _created_key(record: DishRecord) -> tuple[int, datetime | str]:
    raw = record.created_at or ""
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        # Unparseable timestamps go last, ordered by their raw text.
        return (1, raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (0, parsed)


def sort_by_created(records: Iterable[DishRecord]) -> list[DishRecord]:
    """Ascending by creation time. Ties keep their input order."""
    return sorted(records, key=_created_key)


def visible_records(records: Iterable[DishRecord], spec: FilterSpec) -> list[DishRecord]:
    """Display order: filtered, then sorted by creation time."""
    return sort_by_created(filter_records(records, spec))


def to_json(records: Iterable[DishRecord]) -> str:
    """Serialize every record and field, ignoring any filter state."""
    return json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False)


def export_json(records: Iterable[DishRecord]) -> str:
    """Serialize as ``{"dishes": [...]}`` for the export view."""
    return json.dumps({"dishes": [record.to_dict() for record in records]}, indent=2, ensure_ascii=False)


def from_json(text: str) -> list[DishRecord]:
    raw = json.loads(text)
    if not isinstance(raw, list):
        raise ValueError("expected a JSON array of dish records")
    return [DishRecord.from_dict(item) for item in raw]


def upsert_all(existing: Sequence[DishRecord], incoming: Iterable[DishRecord]) -> list[DishRecord]:
    """Replace the whole collection with ``incoming``. Last fetch wins.

    No field-level merge with ``existing`` is attempted.
    """
    return list(incoming)


def find_record(records: Iterable[DishRecord], record_id: str) -> DishRecord | None:
    for record in records:
        if record.id == record_id:
            return record
    return None


def append_record(records: Iterable[DishRecord], record: DishRecord) -> list[DishRecord]:
    return [*records, record]


def replace_record(records: Iterable[DishRecord], record: DishRecord) -> list[DishRecord]:
    """Swap the record sharing ``record.id`` in place, keeping order.

    Raises KeyError when no record has that id.
    """
    out: list[DishRecord] = []
    found = False
    for existing in records:
        if existing.id == record.id:
            out.append(record)
            found = True
        else:
            out.append(existing)
    if not found:
        raise KeyError(record.id)
    return out


def remove_record(records: Iterable[DishRecord], record_id: str) -> list[DishRecord]:
    """Drop the record with ``record_id``. Unknown ids leave the list unchanged."""
    return [record for record in records if record.id != record_id]
