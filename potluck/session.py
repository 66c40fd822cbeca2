"""The dish list owned by one running app, wired to local or remote storage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from potluck.aggregate import (
    append_record,
    export_json,
    find_record,
    remove_record,
    replace_record,
    to_json,
    upsert_all,
    visible_records,
)
from potluck.config import GITHUB_REPOSITORY, ISSUE_LABEL, REMOTE_DISHES_URL, STORAGE_KEY
from potluck.data import seed_dishes
from potluck.errors import ReadOnlyCollection
from potluck.logging_utils import get_logger
from potluck.models import DishRecord, EditPayload, FilterSpec
from potluck.normalize import apply_edit, from_fields
from potluck.persistence import LocalStore
from potluck.remote import compose_issue_url, fetch_remote_dishes

logger = get_logger(__name__)


class SyncMode(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Submission:
    """Result of adding a dish: a stored record, or an issue link to open."""

    record: DishRecord | None = None
    issue_url: str | None = None


class DishBook:
    """Owns the current collection and routes changes to the configured storage.

    LOCAL mode persists every change to a LocalStore. REMOTE mode is read-only:
    the collection is replaced wholesale by each refresh and new dishes are
    submitted as GitHub issues.
    """

    def __init__(
        self,
        mode: SyncMode = SyncMode.LOCAL,
        *,
        store: LocalStore | None = None,
        storage_key: str = STORAGE_KEY,
        remote_url: str = REMOTE_DISHES_URL,
        repo: str = GITHUB_REPOSITORY,
        label: str = ISSUE_LABEL,
        fetcher: Callable[[str], list[DishRecord]] = fetch_remote_dishes,
    ) -> None:
        self.mode = SyncMode(mode)
        self.store = store if store is not None else (LocalStore() if self.mode is SyncMode.LOCAL else None)
        self.storage_key = storage_key
        self.remote_url = remote_url
        self.repo = repo
        self.label = label
        self.fetcher = fetcher
        self._records: list[DishRecord] = []

    @property
    def records(self) -> tuple[DishRecord, ...]:
        return tuple(self._records)

    def load(self) -> tuple[DishRecord, ...]:
        if self.mode is SyncMode.REMOTE:
            return self.refresh()
        assert self.store is not None
        self._records = self.store.load_records(self.storage_key, seed_dishes())
        logger.info(f"load local count={len(self._records)}")
        return self.records

    def refresh(self) -> tuple[DishRecord, ...]:
        """Re-fetch the remote file and replace the collection. Failures yield an empty list."""
        if self.mode is not SyncMode.REMOTE:
            return self.records
        incoming = self.fetcher(self.remote_url)
        self.replace_all(incoming)
        return self.records

    def replace_all(self, incoming: list[DishRecord]) -> None:
        self._records = upsert_all(self._records, incoming)

    def add(
        self,
        dish_name: str,
        guest_name: str,
        is_vegan: bool = False,
        is_gluten_free: bool = False,
        is_lactose_free: bool = False,
    ) -> Submission:
        """Validate and add a dish. Raises ValidationError on missing names."""
        if self.mode is SyncMode.REMOTE:
            url = compose_issue_url(
                self.repo,
                dish_name,
                guest_name,
                is_vegan,
                is_gluten_free,
                is_lactose_free,
                label=self.label,
            )
            return Submission(issue_url=url)

        record = from_fields(dish_name, guest_name, is_vegan, is_gluten_free, is_lactose_free)
        self._records = append_record(self._records, record)
        self._persist()
        return Submission(record=record)

    def get(self, record_id: str) -> DishRecord | None:
        return find_record(self._records, record_id)

    def edit(self, record_id: str, payload: EditPayload) -> DishRecord:
        self._require_local()
        current = find_record(self._records, record_id)
        if current is None:
            raise KeyError(record_id)
        updated = apply_edit(current, payload)
        self._records = replace_record(self._records, updated)
        self._persist()
        return updated

    def remove(self, record_id: str) -> None:
        self._require_local()
        self._records = remove_record(self._records, record_id)
        self._persist()

    def reset(self) -> None:
        self._require_local()
        self._records = []
        self._persist()

    def visible(self, spec: FilterSpec) -> list[DishRecord]:
        return visible_records(self._records, spec)

    def to_json(self) -> str:
        return to_json(self._records)

    def export_json(self) -> str:
        return export_json(self._records)

    def _require_local(self) -> None:
        if self.mode is not SyncMode.LOCAL:
            raise ReadOnlyCollection("dishes are managed through GitHub issues in remote mode")

    def _persist(self) -> None:
        assert self.store is not None
        self.store.save_records(self.storage_key, self._records)
