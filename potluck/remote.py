"""Remote dishes file fetch and GitHub issue submission links."""

from __future__ import annotations

import time
import webbrowser
from urllib.parse import quote, urlencode

import requests

from potluck.config import HTTP_TIMEOUT_SECONDS, ISSUE_LABEL
from potluck.logging_utils import get_logger
from potluck.models import DishRecord
from potluck.normalize import from_fields

logger = get_logger(__name__)


def fetch_remote_dishes(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> list[DishRecord]:
    """GET the aggregated dishes file.

    Never raises: network errors, non-2xx responses and malformed bodies all
    degrade to an empty list so the caller shows "no dishes".
    """
    if not url:
        logger.warning("fetch_remote_dishes called without a url")
        return []

    http = session or requests
    try:
        resp = http.get(
            url,
            params={"t": int(time.time() * 1000)},
            headers={"Cache-Control": "no-cache"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logger.warning(f"fetch_remote_dishes request failed url={url!r} error={exc!r}")
        return []

    if not resp.ok:
        logger.warning(f"fetch_remote_dishes status={resp.status_code} url={url!r}")
        return []

    try:
        payload = resp.json()
    except ValueError as exc:
        logger.warning(f"fetch_remote_dishes bad json url={url!r} error={exc!r}")
        return []
    if not isinstance(payload, list):
        logger.warning(f"fetch_remote_dishes expected array got={type(payload).__name__}")
        return []

    records: list[DishRecord] = []
    for item in payload:
        try:
            records.append(DishRecord.from_dict(item))
        except ValueError as exc:
            logger.debug(f"fetch_remote_dishes skipped item error={exc}")
    logger.info(f"fetch_remote_dishes loaded={len(records)} url={url!r}")
    return records


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def issue_title(dish_name: str, guest_name: str) -> str:
    return f"Dish: {dish_name} — {guest_name}"


def issue_body(
    dish_name: str,
    guest_name: str,
    is_vegan: bool = False,
    is_gluten_free: bool = False,
    is_lactose_free: bool = False,
) -> str:
    return "\n".join(
        [
            f"Dish Name: {dish_name}",
            f"Guest Name: {guest_name}",
            f"Vegan: {_yes_no(is_vegan)}",
            f"Gluten Free: {_yes_no(is_gluten_free)}",
            f"Lactose Free: {_yes_no(is_lactose_free)}",
        ]
    )


def compose_issue_url(
    repo: str,
    dish_name: str,
    guest_name: str,
    is_vegan: bool = False,
    is_gluten_free: bool = False,
    is_lactose_free: bool = False,
    *,
    label: str = ISSUE_LABEL,
) -> str:
    """Build a pre-filled ``issues/new`` link for the sign-up.

    Names are validated with the same rules as a local submission, so a
    ValidationError is raised before any link is produced.
    """
    if not repo:
        raise ValueError("repo is required, e.g. 'owner/name'")

    record = from_fields(dish_name, guest_name, is_vegan, is_gluten_free, is_lactose_free)
    params = {
        "title": issue_title(record.dish_name, record.guest_name),
        "body": issue_body(
            record.dish_name,
            record.guest_name,
            record.is_vegan,
            record.is_gluten_free,
            record.is_lactose_free,
        ),
    }
    if label:
        params["labels"] = label
    return f"https://github.com/{repo}/issues/new?{urlencode(params, quote_via=quote)}"


def open_issue_form(url: str) -> bool:
    """Open the issue link in a new browser tab. No response is awaited."""
    opened = webbrowser.open_new_tab(url)
    logger.info(f"open_issue_form opened={opened}")
    return opened
