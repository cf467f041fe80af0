"""User record store interfaces.

The cooldown gate depends on this abstraction (not on a concrete backend) so
storage can move from the in-process store to a shared one without touching
the gate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Final, Mapping

from nomie_weather.core.errors import StoreUnavailableError

# Field names used in the serialized item
ID_FIELD: Final = "id"
LAST_ACTION_FIELD: Final = "last_push"


class _Unset:
    """Sentinel type for "no write condition"."""

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return "UNSET"


UNSET: Final = _Unset()


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``.

    Naive values are interpreted as UTC.

    Raises:
        ValueError: If ``raw`` is not a valid ISO-8601 timestamp.
    """
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string ending in ``Z``.

    Millisecond precision (``2024-01-01T12:00:00.000Z``) unless the value
    carries sub-millisecond detail, which is kept so a round trip is exact.
    """
    value = value.astimezone(timezone.utc)
    timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
    return value.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


@dataclass(frozen=True)
class UserCooldownRecord:
    """Stored state for one Nomie user.

    Attributes:
        id: Opaque user identifier (primary key).
        last_action_at: When commands were last handed out, if ever.
        extra: Every other stored field, carried through rewrites unchanged.
    """

    id: str
    last_action_at: datetime | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def empty(cls, record_id: str) -> "UserCooldownRecord":
        return cls(id=record_id)

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "UserCooldownRecord":
        """Build a record from a raw store item.

        Args:
            item: Mapping as persisted by a store backend.

        Returns:
            The parsed record.

        Raises:
            StoreUnavailableError: If the item has no id or an unreadable timestamp.
        """
        record_id = item.get(ID_FIELD)
        if not isinstance(record_id, str) or not record_id:
            raise StoreUnavailableError(
                code="store_item_invalid",
                message="Stored user record has no usable id",
                details={"field": ID_FIELD},
            )

        raw_ts = item.get(LAST_ACTION_FIELD)
        last_action_at: datetime | None = None
        if raw_ts is not None:
            try:
                last_action_at = parse_timestamp(str(raw_ts))
            except ValueError as exc:
                raise StoreUnavailableError(
                    code="store_item_invalid",
                    message="Stored user record has an unreadable timestamp",
                    details={"field": LAST_ACTION_FIELD},
                ) from exc

        extra = {
            k: v for k, v in item.items() if k not in (ID_FIELD, LAST_ACTION_FIELD)
        }
        return cls(id=record_id, last_action_at=last_action_at, extra=extra)

    def to_item(self) -> dict[str, Any]:
        """Serialize to a plain mapping; ``id`` always wins over ``extra``."""
        item: dict[str, Any] = dict(self.extra)
        item[ID_FIELD] = self.id
        if self.last_action_at is not None:
            item[LAST_ACTION_FIELD] = format_timestamp(self.last_action_at)
        return item

    def with_last_action_at(self, when: datetime) -> "UserCooldownRecord":
        return UserCooldownRecord(id=self.id, last_action_at=when, extra=self.extra)


class AbstractRecordStore(ABC):
    """Interface for user record stores.

    Backends provide last-writer-wins semantics. Backends that set
    ``supports_conditional_writes`` additionally honour
    ``expected_last_action_at`` on ``put``.
    """

    supports_conditional_writes: bool = False

    @abstractmethod
    async def get(self, record_id: str) -> UserCooldownRecord | None:
        """Fetch a record by id.

        Args:
            record_id: User identifier.

        Returns:
            The stored record, or None when nothing is stored for the id.

        Raises:
            StoreUnavailableError: If the backend cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    async def put(
        self,
        record: UserCooldownRecord,
        *,
        expected_last_action_at: datetime | None | _Unset = UNSET,
    ) -> None:
        """Create or overwrite a record.

        Args:
            record: Record to persist. Unknown fields in ``record.extra`` are kept.
            expected_last_action_at: When given, only write if the stored
                ``last_action_at`` still equals this value (None meaning
                "no record or no timestamp").

        Raises:
            StoreWriteFailureError: If the backend cannot be written.
            StoreConflictError: If the write condition does not hold.
        """
        raise NotImplementedError
