"""Factory for creating weather client instances."""

from nomie_weather.adapters.weather.base import AbstractWeatherClient
from nomie_weather.adapters.weather.openweathermap import OpenWeatherMapClient
from nomie_weather.core.config import settings
from nomie_weather.core.errors import ConfigurationAppError


def create_weather_client() -> AbstractWeatherClient:
    """Instantiate the OpenWeatherMap client from settings.

    Returns:
        AbstractWeatherClient: Configured weather client.

    Raises:
        ConfigurationAppError: If WEATHER_API_KEY is not configured.
    """
    if not settings.weather.api_key:
        raise ConfigurationAppError(
            code="weather_missing_api_key",
            message="OpenWeatherMap requires WEATHER_API_KEY environment variable",
        )
    return OpenWeatherMapClient(
        api_key=settings.weather.api_key,
        base_url=settings.weather.base_url,
        timeout_seconds=settings.weather.timeout_seconds,
    )
