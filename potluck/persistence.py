"""SQLite-backed key-value store for the local dish list."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from potluck.config import DB_PATH
from potluck.logging_utils import get_logger
from potluck.models import DishRecord

logger = get_logger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalStore:
    """Whole-value reads and writes of JSON arrays under string keys."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)
        self._bootstrapped = False

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the key-value table if it does not already exist."""
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
        self._bootstrapped = True

    def _ensure_schema(self) -> None:
        if not self._bootstrapped:
            self.bootstrap_schema()

    def load(self, key: str, fallback: list[Any] | None) -> list[Any] | None:
        """Return the stored array, or ``fallback`` if absent, malformed or unreadable."""
        try:
            self._ensure_schema()
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except (sqlite3.Error, OSError) as exc:
            logger.warning(f"load failed key={key!r} error={exc!r}")
            return fallback

        if row is None or not row[0]:
            return fallback
        try:
            parsed = json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning(f"load malformed json key={key!r}")
            return fallback
        if not isinstance(parsed, list):
            logger.warning(f"load non-array value key={key!r}")
            return fallback
        return parsed

    def save(self, key: str, value: list[Any]) -> None:
        """Replace the value under ``key``. Failures are logged and ignored."""
        try:
            payload = json.dumps(value, ensure_ascii=False)
            self._ensure_schema()
            with self._connect() as conn:
                with conn:
                    conn.execute(
                        """
                        INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                        """,
                        (key, payload, _utc_now_iso()),
                    )
        except (sqlite3.Error, OSError, TypeError, ValueError) as exc:
            logger.warning(f"save failed key={key!r} error={exc!r}")

    def clear(self, key: str) -> None:
        self.save(key, [])

    def load_records(self, key: str, fallback: list[DishRecord]) -> list[DishRecord]:
        """Load dish records, skipping stored rows that no longer parse."""
        raw_items = self.load(key, None)
        if raw_items is None:
            return list(fallback)

        records: list[DishRecord] = []
        for item in raw_items:
            try:
                records.append(DishRecord.from_dict(item))
            except ValueError as exc:
                logger.warning(f"load_records skipped row key={key!r} error={exc}")
        return records

    def save_records(self, key: str, records: Iterable[DishRecord]) -> None:
        self.save(key, [record.to_dict() for record in records])

