"""Per-user cooldown gate for handing out Nomie track commands.

The gate decides whether enough time has passed since a user last received
track commands and, when it has, records the new timestamp before reporting
the grant. A grant is only ever reported after the write succeeded, so the
caller can tie its side effect (returning commands) to ``allowed``.

Decision rules:
- No record, or a record without a timestamp: allowed.
- Otherwise elapsed = |now - last_action_at| in float minutes (absolute, so
  clock skew never produces a negative age); allowed iff
  ``elapsed > cooldown_minutes``. Equality is a denial.
- Exactly one store read per evaluation, and one write only when allowed.

Known limitation: with a store that lacks conditional writes, two concurrent
requests for the same user can both read "allowed" before either writes and
both receive commands. Stores that support conditional writes turn the
second grant into a ``StoreConflictError`` instead.

Known limitation: because elapsed is absolute, a stored timestamp more than
``cooldown_minutes`` in the future (clock skew between writers) counts as
elapsed. The grant then stores ``now``, so ``last_action_at`` moves backwards
and is not monotonic per user in that case.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from nomie_weather.adapters.store.base import UNSET, AbstractRecordStore, UserCooldownRecord
from nomie_weather.core.errors import (
    InvalidInputError,
    StoreUnavailableError,
    StoreWriteFailureError,
)
from nomie_weather.core.logging import hash_identifier

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MINUTES = 10.0


class CooldownState(str, Enum):
    """Where a user stands relative to the cooldown window."""

    NEVER_ACTED = "never_acted"
    COOLING_DOWN = "cooling_down"
    READY = "ready"


@dataclass(frozen=True)
class GateResult:
    """Outcome of a gate evaluation.

    Attributes:
        allowed: True only when the grant was decided and persisted.
        elapsed_minutes: Minutes since the previous grant, None if there was none.
        state: State observed before the decision.
    """

    allowed: bool
    elapsed_minutes: float | None
    state: CooldownState


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> float:
    """Absolute distance between two instants in (fractional) minutes."""
    return abs((end - start).total_seconds()) / 60.0


def classify(
    last_action_at: datetime | None,
    now: datetime,
    cooldown_minutes: float,
) -> tuple[CooldownState, float | None]:
    """Classify a user's cooldown state.

    Args:
        last_action_at: Timestamp of the previous grant, if any.
        now: Evaluation time.
        cooldown_minutes: Length of the cooldown window.

    Returns:
        Tuple of (state, elapsed_minutes); elapsed is None for NEVER_ACTED.
    """
    if last_action_at is None:
        return CooldownState.NEVER_ACTED, None

    elapsed = minutes_between(last_action_at, now)
    if elapsed > cooldown_minutes:
        return CooldownState.READY, elapsed
    return CooldownState.COOLING_DOWN, elapsed


def _validate_inputs(identifier: str, now: datetime, cooldown_minutes: float) -> None:
    """Reject unusable arguments before touching the store.

    Raises:
        InvalidInputError: On a blank identifier, a naive ``now`` or a
            negative/non-finite cooldown.
    """
    if not isinstance(identifier, str) or not identifier.strip():
        raise InvalidInputError(
            code="invalid_identifier",
            message="identifier must be a non-empty string",
            details={"field": "identifier"},
        )
    if now.tzinfo is None or now.utcoffset() is None:
        raise InvalidInputError(
            code="invalid_timestamp",
            message="now must be a timezone-aware datetime",
            details={"field": "now"},
        )
    if (
        isinstance(cooldown_minutes, bool)
        or not isinstance(cooldown_minutes, (int, float))
        or not math.isfinite(cooldown_minutes)
        or cooldown_minutes < 0
    ):
        raise InvalidInputError(
            code="invalid_cooldown",
            message="cooldown_minutes must be a finite number >= 0",
            details={"field": "cooldown_minutes"},
        )


class CooldownGate:
    """Rate-limited, write-before-grant gate over a user record store.

    Attributes:
        store: Record store holding one record per user.
    """

    def __init__(
        self,
        store: AbstractRecordStore,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the gate.

        Args:
            store: Record store adapter.
            clock: Time source used when ``evaluate`` gets no explicit ``now``.
        """
        self.store = store
        self._clock = clock

    async def evaluate(
        self,
        identifier: str,
        now: datetime | None = None,
        cooldown_minutes: float = DEFAULT_COOLDOWN_MINUTES,
    ) -> GateResult:
        """Decide whether ``identifier`` may act now, persisting a grant.

        Args:
            identifier: User identifier (store primary key).
            now: Evaluation time; defaults to the gate's clock.
            cooldown_minutes: Minimum minutes between two grants.

        Returns:
            GateResult; ``allowed`` is True only after the write succeeded.

        Raises:
            InvalidInputError: Bad arguments (no store I/O happened).
            StoreUnavailableError: The record could not be read; nothing was granted.
            StoreWriteFailureError: A grant was decided but could not be
                persisted (``StoreConflictError`` when a concurrent grant won).
        """
        now = self._clock() if now is None else now
        _validate_inputs(identifier, now, cooldown_minutes)
        id_hash = hash_identifier(identifier)

        try:
            record = await self.store.get(identifier)
        except StoreUnavailableError as exc:
            logger.error(
                "cooldown_gate.store_read_failed",
                extra={"id_hash": id_hash, "error_code": exc.code},
            )
            raise

        previous = record.last_action_at if record is not None else None
        state, elapsed = classify(previous, now, cooldown_minutes)

        if state is CooldownState.COOLING_DOWN:
            logger.info(
                "cooldown_gate.denied",
                extra={
                    "id_hash": id_hash,
                    "elapsed_minutes": elapsed,
                    "cooldown_minutes": cooldown_minutes,
                },
            )
            return GateResult(allowed=False, elapsed_minutes=elapsed, state=state)

        updated = (record or UserCooldownRecord.empty(identifier)).with_last_action_at(now)
        expected = previous if self.store.supports_conditional_writes else UNSET

        try:
            await self.store.put(updated, expected_last_action_at=expected)
        except StoreWriteFailureError as exc:
            logger.error(
                "cooldown_gate.store_write_failed",
                extra={
                    "id_hash": id_hash,
                    "error_code": exc.code,
                    "state": state.value,
                },
            )
            raise

        logger.info(
            "cooldown_gate.allowed",
            extra={
                "id_hash": id_hash,
                "elapsed_minutes": elapsed,
                "cooldown_minutes": cooldown_minutes,
                "state": state.value,
            },
        )
        return GateResult(allowed=True, elapsed_minutes=elapsed, state=state)
