"""Tests for the SQLite key-value store."""

import json
import sqlite3

import pytest

from potluck.models import DishRecord
from potluck.persistence import LocalStore

KEY = "friendsgiving_dishes_v6"


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "nested" / "potluck.db")


def _write_raw(store, key, value):
    store.bootstrap_schema()
    with sqlite3.connect(store.db_path) as conn:
        conn.execute(
            "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, 'now')",
            (key, value),
        )


def test_load_missing_key_returns_fallback(store):
    assert store.load(KEY, ["fallback"]) == ["fallback"]


def test_save_then_load_round_trips(store):
    store.save(KEY, [{"a": 1}, {"b": 2}])
    assert store.load(KEY, []) == [{"a": 1}, {"b": 2}]


def test_save_replaces_whole_value(store):
    store.save(KEY, [1, 2, 3])
    store.save(KEY, [4])
    assert store.load(KEY, []) == [4]


def test_malformed_json_returns_fallback(store):
    _write_raw(store, KEY, "{not json")
    assert store.load(KEY, ["seed"]) == ["seed"]


def test_non_array_returns_fallback(store):
    _write_raw(store, KEY, json.dumps({"dishes": []}))
    assert store.load(KEY, ["seed"]) == ["seed"]


def test_save_failure_is_swallowed(store):
    store.save(KEY, [object()])
    assert store.load(KEY, ["untouched"]) == ["untouched"]


def test_unreadable_db_returns_fallback(tmp_path):
    db_dir = tmp_path / "is-a-directory.db"
    db_dir.mkdir()
    bad = LocalStore(db_dir)

    assert bad.load(KEY, ["seed"]) == ["seed"]
    bad.save(KEY, [1])


def test_load_records_uses_fallback_only_when_never_saved(store):
    seed = [DishRecord(id="s", dish_name="Pie", guest_name="Emily", created_at="t")]

    assert store.load_records(KEY, seed) == seed

    store.clear(KEY)
    assert store.load_records(KEY, seed) == []


def test_load_records_skips_bad_rows_and_reads_legacy_names(store):
    store.save(
        KEY,
        [
            {"id": "1", "dishName": "Pie", "yourName": "Emily", "isVegan": True, "createdAt": "t1"},
            {"id": "2", "dishName": "", "guestName": "Nobody", "createdAt": "t2"},
            "not a dict",
        ],
    )

    records = store.load_records(KEY, [])

    assert records == [
        DishRecord(id="1", dish_name="Pie", guest_name="Emily", is_vegan=True, created_at="t1"),
    ]


def test_save_records_writes_camel_case(store):
    store.save_records(KEY, [DishRecord(id="1", dish_name="Pie", guest_name="Emily", created_at="t")])
    assert store.load(KEY, []) == [
        {
            "id": "1",
            "dishName": "Pie",
            "guestName": "Emily",
            "isVegan": False,
            "isGlutenFree": False,
            "isLactoseFree": False,
            "createdAt": "t",
        }
    ]
