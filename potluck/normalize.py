"""Turn form input or issue text into canonical dish records."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from uuid import uuid4

from potluck.errors import ValidationError, ValidationIssue
from potluck.logging_utils import get_logger
from potluck.models import DishRecord, EditPayload

logger = get_logger(__name__)

# Em dash only. "Dish: Pie - Emily" falls through to the body scan.
_TITLE_RE = re.compile(r"^\s*Dish:\s*(?P<dish>.+?)\s*—\s*(?P<guest>.+?)\s*$")
_DISH_LINE_RE = re.compile(r"^\s*Dish Name\s*:(?P<value>.*)$", re.IGNORECASE)
_GUEST_LINE_RE = re.compile(r"^\s*Guest Name\s*:(?P<value>.*)$", re.IGNORECASE)
_FLAG_LINE_RES = {
    "is_vegan": re.compile(r"^\s*Vegan\s*:(?P<value>.*)$", re.IGNORECASE),
    "is_gluten_free": re.compile(r"^\s*Gluten Free\s*:(?P<value>.*)$", re.IGNORECASE),
    "is_lactose_free": re.compile(r"^\s*Lactose Free\s*:(?P<value>.*)$", re.IGNORECASE),
}
_TRUTHY = {"yes", "true"}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_names(dish_name: str, guest_name: str, *, dish_message: str, guest_message: str) -> None:
    issues: list[tuple[ValidationIssue, str]] = []
    if not dish_name:
        issues.append((ValidationIssue.MISSING_DISH_NAME, dish_message))
    if not guest_name:
        issues.append((ValidationIssue.MISSING_GUEST_NAME, guest_message))
    if issues:
        raise ValidationError(issues)


def from_fields(
    dish_name: str | None,
    guest_name: str | None,
    is_vegan: bool = False,
    is_gluten_free: bool = False,
    is_lactose_free: bool = False,
) -> DishRecord:
    """Validate submitted form fields and create a new record.

    Raises ValidationError listing every missing field.
    """
    dish = (dish_name or "").strip()
    guest = (guest_name or "").strip()
    _check_names(dish, guest, dish_message="Dish name is required.", guest_message="Guest name is required.")

    return DishRecord(
        id=uuid4().hex,
        dish_name=dish,
        guest_name=guest,
        is_vegan=bool(is_vegan),
        is_gluten_free=bool(is_gluten_free),
        is_lactose_free=bool(is_lactose_free),
        created_at=_utc_now_iso(),
    )


def _first_line_value(pattern: re.Pattern[str], lines: list[str]) -> str | None:
    for line in lines:
        match = pattern.match(line)
        if match:
            return match.group("value").strip()
    return None


def _names_from_title(title: str) -> tuple[str, str] | None:
    match = _TITLE_RE.match(title or "")
    if match is None:
        return None
    return match.group("dish").strip(), match.group("guest").strip()


def _names_from_body(lines: list[str]) -> tuple[str, str]:
    dish = _first_line_value(_DISH_LINE_RE, lines) or ""
    guest = _first_line_value(_GUEST_LINE_RE, lines) or ""
    return dish, guest


def from_text(title: str, body: str, *, source_id: str, created_at: str) -> DishRecord | None:
    """Parse an issue title/body into a record, or None when names are missing.

    ``source_id`` becomes the record id so parsing the same issue twice yields
    the same identity. ``created_at`` is kept verbatim.
    """
    lines = (body or "").splitlines()

    names = _names_from_title(title)
    if names is None:
        names = _names_from_body(lines)
    dish, guest = names
    if not dish or not guest:
        logger.debug(f"from_text no names source_id={source_id!r} title={title!r}")
        return None

    flags = {}
    for field_name, pattern in _FLAG_LINE_RES.items():
        value = _first_line_value(pattern, lines)
        flags[field_name] = value is not None and value.lower() in _TRUTHY

    return DishRecord(
        id=source_id,
        dish_name=dish,
        guest_name=guest,
        created_at=created_at,
        **flags,
    )


def apply_edit(record: DishRecord, payload: EditPayload) -> DishRecord:
    """Return an edited copy of ``record``.

    Names are trimmed and validated; all three flags are replaced by the
    payload's values. Identity and creation time never change.
    """
    dish = (payload.dish_name or "").strip()
    guest = (payload.guest_name or "").strip()
    _check_names(dish, guest, dish_message="Dish name cannot be empty.", guest_message="Guest name cannot be empty.")

    return DishRecord(
        id=record.id,
        dish_name=dish,
        guest_name=guest,
        is_vegan=bool(payload.is_vegan),
        is_gluten_free=bool(payload.is_gluten_free),
        is_lactose_free=bool(payload.is_lactose_free),
        created_at=record.created_at,
    )
