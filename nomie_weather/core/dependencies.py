"""Service wiring for FastAPI routes.

Routes depend on ``get_weather_service`` only. The record store is cached
in-module so user state survives across requests; when the store settings
change (primarily in tests) it is rebuilt. Tests can also replace the whole
service through ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging

from nomie_weather.adapters.store.base import AbstractRecordStore
from nomie_weather.adapters.store.factory import create_record_store
from nomie_weather.core.config import settings
from nomie_weather.services.cooldown_gate import CooldownGate
from nomie_weather.services.weather_service import WeatherService

logger = logging.getLogger(__name__)


_store: AbstractRecordStore | None = None
_store_config: tuple[str, str] | None = None


def get_record_store() -> AbstractRecordStore:
    """Return the process-wide record store.

    Returns:
        AbstractRecordStore: Configured store instance.
    """

    global _store, _store_config

    config = (settings.store.backend, settings.store.file_path)

    if _store is None or _store_config != config:
        _store = create_record_store()
        _store_config = config
        logger.info("store.initialized", extra={"backend": settings.store.backend})

    return _store


def reset_record_store() -> None:
    """Drop the cached store so the next request builds a fresh one."""

    global _store, _store_config
    _store = None
    _store_config = None


def get_weather_service() -> WeatherService:
    """Build the capture service for one request.

    Raises:
        ConfigurationAppError: If the record store is misconfigured. A missing
            weather API key only surfaces once a capture needs the weather.
    """

    return WeatherService(
        weather=None,
        gate=CooldownGate(get_record_store()),
        cooldown_minutes=settings.app.cooldown_minutes,
    )
