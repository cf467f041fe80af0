"""OpenWeatherMap current-weather client adapter."""

import logging

import httpx
from pydantic import ValidationError

from nomie_weather.adapters.weather.base import AbstractWeatherClient
from nomie_weather.core.errors import WeatherAppError
from nomie_weather.schemas.weather import WeatherReport

logger = logging.getLogger(__name__)

CURRENT_WEATHER_PATH = "/data/2.5/weather"


class OpenWeatherMapClient(AbstractWeatherClient):
    """Client for the OpenWeatherMap "current weather" endpoint.

    Uses httpx with a fresh AsyncClient per call unless one is injected.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "http://api.openweathermap.org",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: OpenWeatherMap key, sent as the ``appid`` query parameter.
            base_url: Provider base URL.
            timeout_seconds: Timeout for requests in seconds.
            client: Optional shared AsyncClient (caller owns its lifecycle).
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _get(self, params: dict[str, str | float]) -> httpx.Response:
        url = f"{self.base_url}{CURRENT_WEATHER_PATH}"
        if self._client is not None:
            return await self._client.get(url, params=params, timeout=self.timeout_seconds)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.get(url, params=params)

    async def fetch_current(self, lat: float, lon: float) -> WeatherReport:
        """Fetch and parse current conditions for a coordinate.

        Raises:
            WeatherAppError: ``weather_unavailable`` on transport errors,
                ``weather_http_error`` on non-2xx responses and
                ``weather_invalid_response`` when the body cannot be parsed.
        """
        params: dict[str, str | float] = {"lat": lat, "lon": lon, "appid": self.api_key}

        try:
            response = await self._get(params)
        except httpx.RequestError as exc:
            logger.warning(
                "weather.fetch_failed",
                extra={"reason": "transport", "error_type": type(exc).__name__},
            )
            raise WeatherAppError(
                code="weather_unavailable",
                message=f"Weather service unreachable: {exc}",
            ) from exc

        if not response.is_success:
            logger.warning(
                "weather.fetch_failed",
                extra={"reason": "http_status", "status_code": response.status_code},
            )
            raise WeatherAppError(
                code="weather_http_error",
                message=f"Failed to load weather, status code: {response.status_code}",
                details={"http_status": response.status_code},
            )

        try:
            report = WeatherReport.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("weather.fetch_failed", extra={"reason": "invalid_body"})
            raise WeatherAppError(
                code="weather_invalid_response",
                message="Weather service returned an unexpected response",
            ) from exc

        logger.info("weather.fetched", extra={"city": report.name})
        return report
