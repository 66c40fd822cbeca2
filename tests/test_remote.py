"""Tests for the remote dishes fetch and issue link composition."""

from urllib.parse import parse_qs, urlsplit

import pytest

from potluck.errors import ValidationError
from potluck.models import DishRecord
from potluck.remote import compose_issue_url, fetch_remote_dishes, issue_body, open_issue_form

URL = "https://example.github.io/potluck/data/dishes.json"

REMOTE_ITEM = {
    "id": "issue_1",
    "dishName": "Pumpkin Pie",
    "guestName": "Emily",
    "isVegan": False,
    "isGlutenFree": True,
    "isLactoseFree": False,
    "createdAt": "2025-11-01T10:00:00Z",
}


def test_fetch_parses_records(fake_session, fake_response):
    session = fake_session(fake_response(200, [REMOTE_ITEM, {"id": "broken"}]))

    records = fetch_remote_dishes(URL, session=session)

    assert records == [
        DishRecord(
            id="issue_1",
            dish_name="Pumpkin Pie",
            guest_name="Emily",
            is_gluten_free=True,
            created_at="2025-11-01T10:00:00Z",
        )
    ]
    call = session.calls[0]
    assert call["url"] == URL
    assert "t" in call["params"]
    assert call["headers"]["Cache-Control"] == "no-cache"


def test_fetch_server_error_degrades_to_empty(fake_session, fake_response):
    session = fake_session(fake_response(500, text="oops"))
    assert fetch_remote_dishes(URL, session=session) == []


def test_fetch_network_error_degrades_to_empty(fake_session, connection_error):
    session = fake_session(connection_error)
    assert fetch_remote_dishes(URL, session=session) == []


def test_fetch_bad_json_degrades_to_empty(fake_session, fake_response):
    session = fake_session(fake_response(200, text="<html>"))
    assert fetch_remote_dishes(URL, session=session) == []


def test_fetch_non_array_degrades_to_empty(fake_session, fake_response):
    session = fake_session(fake_response(200, {"dishes": [REMOTE_ITEM]}))
    assert fetch_remote_dishes(URL, session=session) == []


def test_fetch_without_url_is_empty():
    assert fetch_remote_dishes("") == []


def test_compose_issue_url_encodes_title_body_and_label():
    url = compose_issue_url("octo/potluck", " Chili ", "Sam", is_vegan=True, label="potluck")

    parts = urlsplit(url)
    assert parts.scheme == "https"
    assert parts.netloc == "github.com"
    assert parts.path == "/octo/potluck/issues/new"
    assert "%20" in parts.query
    assert "+" not in parts.query

    query = parse_qs(parts.query)
    assert query["title"] == ["Dish: Chili — Sam"]
    assert query["body"] == [
        "Dish Name: Chili\nGuest Name: Sam\nVegan: Yes\nGluten Free: No\nLactose Free: No"
    ]
    assert query["labels"] == ["potluck"]


def test_compose_issue_url_without_label():
    query = parse_qs(urlsplit(compose_issue_url("octo/potluck", "Pie", "Emily", label="")).query)
    assert "labels" not in query


def test_compose_issue_url_validates_names():
    with pytest.raises(ValidationError) as excinfo:
        compose_issue_url("octo/potluck", "", "")
    assert len(excinfo.value.messages) == 2


def test_compose_issue_url_requires_repo():
    with pytest.raises(ValueError):
        compose_issue_url("", "Pie", "Emily")


def test_issue_body_renders_yes_no():
    assert issue_body("Pie", "Emily", False, True, True).splitlines()[2:] == [
        "Vegan: No",
        "Gluten Free: Yes",
        "Lactose Free: Yes",
    ]


def test_open_issue_form_uses_new_tab(monkeypatch):
    opened = []
    monkeypatch.setattr("potluck.remote.webbrowser.open_new_tab", lambda url: opened.append(url) or True)

    assert open_issue_form("https://github.com/octo/potluck/issues/new") is True
    assert opened == ["https://github.com/octo/potluck/issues/new"]
