"""Tests for rendering helpers and app wiring."""

from potluck.data import seed_dishes, tag_labels
from potluck.main import build_book
from potluck.models import DishRecord, FilterSpec
from potluck.rendering import badge_style, format_dish_label, format_dish_tags, format_filter_bar, format_status
from potluck.session import SyncMode


def test_dish_label_and_tags():
    record = DishRecord(id="1", dish_name="Roasted Veggies", guest_name="Geoff", is_vegan=True, is_lactose_free=True, created_at="t")

    assert format_dish_label(record).plain == "Roasted Veggies  by Geoff"
    assert format_dish_tags(record).plain == " Vegan   Lactose Free "
    assert tag_labels(record) == ["Vegan", "Lactose Free"]


def test_untagged_dish_has_no_badges():
    record = DishRecord(id="1", dish_name="Pie", guest_name="Emily", created_at="t")
    assert format_dish_tags(record).plain == ""


def test_badge_styles_differ_per_tag():
    assert len({badge_style("vegan"), badge_style("gf"), badge_style("lf")}) == 3


def test_filter_bar_shows_state():
    bar = format_filter_bar(FilterSpec(only_gluten_free=True, search_text="pie"), typing_search=True).plain

    assert "g [x] Gluten Free" in bar
    assert "v [ ] Vegan" in bar
    assert bar.endswith("/ Search: pie|")


def test_status_keeps_brackets_literal():
    status = format_status("a add", "Removed Mac [/] Cheese [b]")

    assert status.plain == "a add\n\nRemoved Mac [/] Cheese [b]"
    assert format_status("a add", "").plain.endswith("Ready")


def test_seed_dishes_have_fresh_ids():
    first, second = seed_dishes(), seed_dishes()
    assert [d.dish_name for d in first] == ["Pumpkin Pie", "Roasted Veggies"]
    assert first[0].id != second[0].id


def test_build_book_wires_storage(tmp_path):
    local = build_book("local", db_path=str(tmp_path / "p.db"))
    remote = build_book("remote", remote_url="https://x/dishes.json", repo="octo/potluck")

    assert local.mode is SyncMode.LOCAL
    assert local.store is not None
    assert remote.mode is SyncMode.REMOTE
    assert remote.store is None
    assert remote.remote_url == "https://x/dishes.json"
