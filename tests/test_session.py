"""Tests for the dish list owner in local and remote modes."""

from urllib.parse import parse_qs, urlsplit

import pytest

from potluck.errors import ReadOnlyCollection, ValidationError
from potluck.models import DishRecord, EditPayload, FilterSpec
from potluck.persistence import LocalStore
from potluck.session import DishBook, SyncMode

KEY = "test_dishes"


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "potluck.db")


@pytest.fixture
def book(store):
    book = DishBook(SyncMode.LOCAL, store=store, storage_key=KEY)
    book.load()
    return book


def test_first_load_seeds_examples(book):
    assert [r.dish_name for r in book.records] == ["Pumpkin Pie", "Roasted Veggies"]


def test_add_persists(book, store):
    submission = book.add("Chili", "Sam", is_vegan=True)

    assert submission.issue_url is None
    assert submission.record in book.records
    reloaded = DishBook(SyncMode.LOCAL, store=store, storage_key=KEY)
    reloaded.load()
    assert reloaded.records == book.records


def test_add_invalid_changes_nothing(book):
    before = book.records
    with pytest.raises(ValidationError):
        book.add("", "")
    assert book.records == before


def test_edit_replaces_in_place(book):
    target = book.records[0]
    book.edit(target.id, EditPayload(dish_name="Apple Pie", guest_name="Emily", is_gluten_free=True))

    edited = book.records[0]
    assert edited.id == target.id
    assert edited.dish_name == "Apple Pie"
    assert edited.is_gluten_free is True
    assert book.records[1].dish_name == "Roasted Veggies"


def test_edit_unknown_id(book):
    with pytest.raises(KeyError):
        book.edit("missing", EditPayload(dish_name="x", guest_name="y"))


def test_remove_and_reset(book, store):
    book.remove(book.records[0].id)
    assert [r.dish_name for r in book.records] == ["Roasted Veggies"]

    book.reset()
    assert book.records == ()
    reloaded = DishBook(SyncMode.LOCAL, store=store, storage_key=KEY)
    assert reloaded.load() == ()


def test_visible_and_exports(book):
    assert [r.dish_name for r in book.visible(FilterSpec(only_vegan=True))] == ["Roasted Veggies"]
    assert '"dishes"' in book.export_json()
    assert book.to_json().startswith("[")


def remote_record(record_id):
    return DishRecord(id=record_id, dish_name="Soup", guest_name="Ana", created_at="2025-11-01T00:00:00Z")


def test_remote_refresh_replaces_wholesale():
    batches = [[remote_record("issue_1"), remote_record("issue_2")], [remote_record("issue_3")]]
    book = DishBook(SyncMode.REMOTE, remote_url="https://x/dishes.json", fetcher=lambda url: batches.pop(0))

    assert [r.id for r in book.load()] == ["issue_1", "issue_2"]
    assert [r.id for r in book.refresh()] == ["issue_3"]


def test_remote_failure_shows_empty_list():
    book = DishBook(SyncMode.REMOTE, remote_url="https://x/dishes.json", fetcher=lambda url: [])
    book.replace_all([remote_record("issue_1")])

    assert book.refresh() == ()


def test_remote_add_returns_issue_link():
    book = DishBook(SyncMode.REMOTE, repo="octo/potluck", label="potluck", fetcher=lambda url: [])

    submission = book.add("Pie", "Emily", is_lactose_free=True)

    assert submission.record is None
    assert book.records == ()
    query = parse_qs(urlsplit(submission.issue_url).query)
    assert query["title"] == ["Dish: Pie — Emily"]
    assert "Lactose Free: Yes" in query["body"][0]


def test_remote_mode_is_read_only():
    book = DishBook(SyncMode.REMOTE, fetcher=lambda url: [remote_record("issue_1")])
    book.load()

    with pytest.raises(ReadOnlyCollection):
        book.remove("issue_1")
    with pytest.raises(ReadOnlyCollection):
        book.edit("issue_1", EditPayload(dish_name="a", guest_name="b"))
    with pytest.raises(ReadOnlyCollection):
        book.reset()


def test_local_refresh_is_a_no_op(book):
    before = book.records
    assert book.refresh() == before
