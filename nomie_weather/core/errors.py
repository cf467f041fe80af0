"""Application-level exception types.

Domain errors shared by the gate, the store adapters and the weather client,
so failures are logged and rendered consistently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    http_status: int
    backend: str
    field: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when client input or request-selected options fail validation."""


class InvalidInputError(ValidationAppError):
    """Raised by the cooldown gate before any I/O when its arguments are unusable."""


class StoreAppError(AppError):
    """Base class for record store failures."""


class StoreUnavailableError(StoreAppError):
    """The user record could not be read (or could not be interpreted)."""


class StoreWriteFailureError(StoreAppError):
    """The user record could not be written."""


class StoreConflictError(StoreWriteFailureError):
    """A conditional write lost against a concurrent writer."""


class WeatherAppError(AppError):
    """Raised when the weather provider call fails."""


class ConfigurationAppError(AppError):
    """Raised when the service itself is misconfigured (e.g. a missing API key)."""
