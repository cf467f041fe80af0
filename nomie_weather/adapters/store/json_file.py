"""JSON-file user record store.

All users live in one JSON object (id -> item). Every write rewrites the
whole document through a temporary file followed by ``os.replace``, so a
crash never leaves a half-written file behind.

Notes:
- Suitable for a single process; an asyncio lock serializes writes, but
  nothing coordinates separate processes sharing the same file.
- Blocking file I/O runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from nomie_weather.adapters.store.base import (
    UNSET,
    AbstractRecordStore,
    UserCooldownRecord,
    _Unset,
)
from nomie_weather.core.errors import (
    StoreConflictError,
    StoreUnavailableError,
    StoreWriteFailureError,
)

logger = logging.getLogger(__name__)


class JsonFileRecordStore(AbstractRecordStore):
    """Record store persisted to a single JSON document on disk."""

    supports_conditional_writes = True

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path)
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, dict[str, Any]]:
        """Load the whole document; a missing file is an empty store.

        Raises:
            StoreUnavailableError: If the file cannot be read or is not a JSON object.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StoreUnavailableError(
                code="store_unavailable",
                message=f"Could not read user store: {exc}",
                details={"backend": "json_file"},
            ) from exc

        if not raw.strip():
            return {}

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreUnavailableError(
                code="store_corrupt",
                message=f"User store is not valid JSON: {exc}",
                details={"backend": "json_file"},
            ) from exc

        if not isinstance(document, dict):
            raise StoreUnavailableError(
                code="store_corrupt",
                message="User store document must be a JSON object",
                details={"backend": "json_file"},
            )
        return document

    def _write_document(self, document: dict[str, dict[str, Any]]) -> None:
        """Atomically replace the document on disk.

        Raises:
            StoreWriteFailureError: If the file cannot be written.
        """
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreWriteFailureError(
                code="store_write_failed",
                message=f"Could not write user store: {exc}",
                details={"backend": "json_file"},
            ) from exc

    def _get_sync(self, record_id: str) -> UserCooldownRecord | None:
        item = self._read_document().get(record_id)
        if item is None:
            return None
        return UserCooldownRecord.from_item(item)

    def _put_sync(
        self,
        record: UserCooldownRecord,
        expected_last_action_at: datetime | None | _Unset,
    ) -> None:
        try:
            document = self._read_document()
            current_item = document.get(record.id)
            current = (
                UserCooldownRecord.from_item(current_item).last_action_at
                if current_item is not None
                else None
            )
        except StoreUnavailableError as exc:
            # A write that cannot read its base document is a write failure.
            raise StoreWriteFailureError(
                code="store_write_failed",
                message=exc.message,
                details={"backend": "json_file"},
            ) from exc

        if not isinstance(expected_last_action_at, _Unset):
            if current != expected_last_action_at:
                raise StoreConflictError(
                    code="store_conflict",
                    message="User record changed since it was read",
                    details={"backend": "json_file"},
                )

        document[record.id] = record.to_item()
        self._write_document(document)

    async def get(self, record_id: str) -> UserCooldownRecord | None:
        return await asyncio.to_thread(self._get_sync, record_id)

    async def put(
        self,
        record: UserCooldownRecord,
        *,
        expected_last_action_at: datetime | None | _Unset = UNSET,
    ) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._put_sync, record, expected_last_action_at)
        logger.debug("store.json_file.written", extra={"path": str(self._path)})
