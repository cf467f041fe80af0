"""Factory for creating user record store instances."""

from nomie_weather.adapters.store.base import AbstractRecordStore
from nomie_weather.adapters.store.in_memory import InMemoryRecordStore
from nomie_weather.adapters.store.json_file import JsonFileRecordStore
from nomie_weather.core.config import settings
from nomie_weather.core.errors import ConfigurationAppError


def create_record_store() -> AbstractRecordStore:
    """Instantiate the record store selected by ``STORE_BACKEND``.

    Returns:
        AbstractRecordStore: Configured store instance.

    Raises:
        ConfigurationAppError: If the backend is unknown or misconfigured.
    """
    backend = settings.store.backend.lower()

    if backend == "memory":
        return InMemoryRecordStore()

    if backend == "json_file":
        if not settings.store.file_path:
            raise ConfigurationAppError(
                code="store_missing_file_path",
                message="json_file store requires STORE_FILE_PATH",
            )
        return JsonFileRecordStore(settings.store.file_path)

    raise ConfigurationAppError(
        code="store_unknown_backend",
        message=(
            f"Unknown store backend: '{backend}'. Supported backends: memory, json_file"
        ),
    )
