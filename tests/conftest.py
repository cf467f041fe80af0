"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that might build settings.
"""

import os

# CRITICAL: Set these before importing nomie_weather (settings are built at import)
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("WEATHER_API_KEY", "test-weather-key")
os.environ.setdefault("WEATHER_BASE_URL", "http://weather.test")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from nomie_weather.adapters.store.base import UNSET, UserCooldownRecord
from nomie_weather.adapters.store.in_memory import InMemoryRecordStore
from nomie_weather.core.errors import StoreUnavailableError, StoreWriteFailureError
from nomie_weather.core.dependencies import reset_record_store

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def minutes(value: float) -> timedelta:
    return timedelta(minutes=value)


class RecordingStore(InMemoryRecordStore):
    """In-memory store that counts calls and can be told to fail."""

    def __init__(
        self,
        items: dict[str, dict[str, Any]] | None = None,
        *,
        conditional: bool = True,
    ) -> None:
        super().__init__(items)
        self.supports_conditional_writes = conditional
        self.get_calls: list[str] = []
        self.put_calls: list[UserCooldownRecord] = []
        self.put_conditions: list[Any] = []
        self.fail_get = False
        self.fail_put = False

    async def get(self, record_id):
        self.get_calls.append(record_id)
        if self.fail_get:
            raise StoreUnavailableError(code="store_unavailable", message="store down")
        return await super().get(record_id)

    async def put(self, record, *, expected_last_action_at=UNSET):
        self.put_calls.append(record)
        self.put_conditions.append(expected_last_action_at)
        if self.fail_put:
            raise StoreWriteFailureError(code="store_write_failed", message="disk full")
        await super().put(record, expected_last_action_at=expected_last_action_at)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def weather_payload() -> dict[str, Any]:
    """A trimmed OpenWeatherMap current-weather response."""
    return {
        "name": "Portland",
        "main": {
            "temp": 295.0,
            "temp_min": 290.15,
            "temp_max": 300.15,
            "humidity": 54,
            "pressure": 1013,
        },
        "weather": [{"main": "Clouds", "description": "broken clouds"}],
    }


@pytest.fixture
def capture_payload() -> dict[str, Any]:
    """A capture event as Nomie posts it, with all three slots mapped."""
    return {
        "anonid": "user-123",
        "experiment": {
            "location": [45.52, -122.68],
            "info": {
                "units": {"value": "celcius"},
                "temptype": {"value": "temp"},
            },
            "slots": {
                "temp": {"tracker": {"label": "Temp"}},
                "humidity": {"tracker": {"label": "Humidity"}},
                "pressure": {"tracker": {"label": "Pressure"}},
            },
        },
    }


@pytest.fixture(autouse=True)
def _fresh_record_store():
    """Each test starts with an empty process-wide store."""
    reset_record_store()
    yield
    reset_record_store()
