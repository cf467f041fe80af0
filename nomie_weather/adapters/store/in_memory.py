"""In-memory user record store.

Notes:
- Per-process only: running multiple workers gives each worker its own users.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime
from typing import Any

from nomie_weather.adapters.store.base import (
    UNSET,
    AbstractRecordStore,
    UserCooldownRecord,
    _Unset,
)
from nomie_weather.core.errors import StoreConflictError


class InMemoryRecordStore(AbstractRecordStore):
    """Record store keeping serialized items in a process-local dict.

    Items are deep-copied on the way in and out, so neither the caller nor
    the store can mutate the other's state. Conditional writes are atomic
    because the compare and the set happen under the same lock.
    """

    supports_conditional_writes = True

    def __init__(self, items: dict[str, dict[str, Any]] | None = None) -> None:
        """Initialize the store.

        Args:
            items: Optional initial items keyed by record id.
        """
        self._lock = threading.RLock()
        self._items: dict[str, dict[str, Any]] = copy.deepcopy(items or {})

    def _current_last_action_at(self, record_id: str) -> datetime | None:
        item = self._items.get(record_id)
        if item is None:
            return None
        return UserCooldownRecord.from_item(item).last_action_at

    async def get(self, record_id: str) -> UserCooldownRecord | None:
        with self._lock:
            item = self._items.get(record_id)
            if item is None:
                return None
            return UserCooldownRecord.from_item(copy.deepcopy(item))

    async def put(
        self,
        record: UserCooldownRecord,
        *,
        expected_last_action_at: datetime | None | _Unset = UNSET,
    ) -> None:
        item = copy.deepcopy(record.to_item())
        with self._lock:
            if not isinstance(expected_last_action_at, _Unset):
                current = self._current_last_action_at(record.id)
                if current != expected_last_action_at:
                    raise StoreConflictError(
                        code="store_conflict",
                        message="User record changed since it was read",
                        details={"backend": "memory"},
                    )
            self._items[record.id] = item

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Return a deep copy of every stored item (for inspection and tests)."""
        with self._lock:
            return copy.deepcopy(self._items)
