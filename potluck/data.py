"""Static seed dishes and dietary tag labels."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from potluck.models import DishRecord

# (record attribute, display label, search token / badge style key)
DIETARY_TAGS: list[tuple[str, str, str]] = [
    ("is_vegan", "Vegan", "vegan"),
    ("is_gluten_free", "Gluten Free", "gf"),
    ("is_lactose_free", "Lactose Free", "lf"),
]

SEED_DISHES: list[dict[str, object]] = [
    {"dish_name": "Pumpkin Pie", "guest_name": "Emily", "is_vegan": False, "is_gluten_free": False, "is_lactose_free": False},
    {"dish_name": "Roasted Veggies", "guest_name": "Geoff", "is_vegan": True, "is_gluten_free": True, "is_lactose_free": True},
]


def seed_dishes() -> list[DishRecord]:
    """Fresh example records shown when the local store is empty."""
    created_at = datetime.now(timezone.utc).isoformat()
    return [DishRecord(id=uuid4().hex, created_at=created_at, **seed) for seed in SEED_DISHES]  # type: ignore[arg-type]


def tag_labels(record: DishRecord) -> list[str]:
    """Display labels for the record's true flags, in fixed order."""
    return [label for attr, label, _ in DIETARY_TAGS if getattr(record, attr)]
