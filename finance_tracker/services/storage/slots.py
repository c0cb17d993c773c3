"""
Typed Collection Slots

Binds a slot name to a list of pydantic models.

CONTRACT:
- load() returns the caller's default when the slot is absent, unreadable
  or fails to parse. Failures are logged, never raised.
- save() overwrites the slot wholesale. Backend failures are logged and
  reported as False - the caller is not interrupted.
- Dates are re-hydrated explicitly by model validation on load.
"""

from typing import Generic, Optional, Sequence, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from finance_tracker.activity import ActivityLogger
from finance_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
)


# Fixed slot names of the persisted state
SLOT_DEBTS = "debts"
SLOT_FIXED_BILLS = "fixedBills"
SLOT_INCOMES = "incomes"
SLOT_PROJECTS = "projects"

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = structlog.get_logger(__name__)


class CollectionSlot(Generic[ModelT]):
    """A named slot holding a JSON array of `model` records."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key: str,
        model: type[ModelT],
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._store = store
        self._key = key
        self._adapter = TypeAdapter(list[model])
        self._activity_logger = activity_logger or ActivityLogger()

    @property
    def key(self) -> str:
        return self._key

    def load(self, default: Optional[list[ModelT]] = None) -> list[ModelT]:
        """Read the collection, falling back to `default` (empty list if omitted)."""
        fallback = list(default) if default is not None else []

        try:
            raw = self._store.get(self._key)
        except StorageError as e:
            self._activity_logger.log_storage_error(self._key, "read", str(e))
            return fallback

        if raw is None:
            return fallback

        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "slot_parse_failed",
                slot=self._key,
                error_count=e.error_count(),
            )
            return fallback

    def save(self, items: Sequence[ModelT]) -> bool:
        """Replace the whole collection. Returns False if the backend failed."""
        payload = self._adapter.dump_json(list(items), by_alias=True).decode("utf-8")

        try:
            self._store.set(self._key, payload)
        except StorageError as e:
            self._activity_logger.log_storage_error(self._key, "write", str(e))
            return False
        return True
