"""Domain models for the potluck sign-up list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


_TRUTHY_STRINGS = {"true", "yes"}


def _flag(value: Any) -> bool:
    """Read a flag from hand-edited JSON. Only true or "true"/"yes" strings count."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_STRINGS
    return False


@dataclass
class DishRecord:
    """A single guest's potluck contribution with dietary tags."""

    id: str
    dish_name: str
    guest_name: str
    is_vegan: bool = False
    is_gluten_free: bool = False
    is_lactose_free: bool = False
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON shape shared with the static dishes file."""
        return {
            "id": self.id,
            "dishName": self.dish_name,
            "guestName": self.guest_name,
            "isVegan": self.is_vegan,
            "isGlutenFree": self.is_gluten_free,
            "isLactoseFree": self.is_lactose_free,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> DishRecord:
        """Build a record from its JSON shape.

        Older local stores saved the guest as ``yourName``; it is accepted when
        ``guestName`` is missing.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"dish record must be an object, got {type(raw).__name__}")

        record_id = raw.get("id")
        dish_name = raw.get("dishName")
        guest_name = raw.get("guestName", raw.get("yourName"))
        created_at = raw.get("createdAt")
        for key, value in (("id", record_id), ("dishName", dish_name), ("guestName", guest_name), ("createdAt", created_at)):
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"dish record is missing {key}")

        return cls(
            id=record_id,
            dish_name=dish_name,
            guest_name=guest_name,
            is_vegan=_flag(raw.get("isVegan")),
            is_gluten_free=_flag(raw.get("isGlutenFree")),
            is_lactose_free=_flag(raw.get("isLactoseFree")),
            created_at=created_at,
        )


@dataclass
class FilterSpec:
    """Active list filters. Inactive flags impose no constraint."""

    only_vegan: bool = False
    only_gluten_free: bool = False
    only_lactose_free: bool = False
    search_text: str = ""

    def is_active(self) -> bool:
        return self.only_vegan or self.only_gluten_free or self.only_lactose_free or bool(self.search_text.strip())


@dataclass(frozen=True)
class EditPayload:
    """Submitted edit form values; all three flags replace the record's flags."""

    dish_name: str
    guest_name: str
    is_vegan: bool = False
    is_gluten_free: bool = False
    is_lactose_free: bool = False
