"""Tests for the OpenWeatherMap adapter and its factory."""

import httpx
import pytest
import respx

from nomie_weather.adapters.weather import OpenWeatherMapClient, create_weather_client
from nomie_weather.core.config import WeatherSettings, settings
from nomie_weather.core.errors import ConfigurationAppError, WeatherAppError

BASE_URL = "http://weather.test"
WEATHER_URL = f"{BASE_URL}/data/2.5/weather"


@pytest.fixture
def client() -> OpenWeatherMapClient:
    return OpenWeatherMapClient(api_key="owm-key", base_url=BASE_URL, timeout_seconds=2.0)


class TestFetchCurrent:
    @pytest.mark.asyncio
    @respx.mock
    async def test_success_parses_report_and_sends_query(self, client, weather_payload) -> None:
        route = respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=weather_payload))

        report = await client.fetch_current(45.52, -122.68)

        assert report.name == "Portland"
        assert report.main.temp == 295.0
        assert report.description == "Clouds"
        params = route.calls.last.request.url.params
        assert params["lat"] == "45.52"
        assert params["lon"] == "-122.68"
        assert params["appid"] == "owm-key"

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_status(self, client) -> None:
        respx.get(WEATHER_URL).mock(return_value=httpx.Response(401, json={"cod": 401}))

        with pytest.raises(WeatherAppError) as exc:
            await client.fetch_current(1.0, 2.0)

        assert exc.value.code == "weather_http_error"
        assert exc.value.details == {"http_status": 401}
        assert "status code: 401" in exc.value.message

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error(self, client) -> None:
        respx.get(WEATHER_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(WeatherAppError) as exc:
            await client.fetch_current(1.0, 2.0)

        assert exc.value.code == "weather_unavailable"

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body(self, client) -> None:
        respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(WeatherAppError) as exc:
            await client.fetch_current(1.0, 2.0)

        assert exc.value.code == "weather_invalid_response"

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_measurements(self, client) -> None:
        respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, json={"name": "Nowhere"}))

        with pytest.raises(WeatherAppError) as exc:
            await client.fetch_current(1.0, 2.0)

        assert exc.value.code == "weather_invalid_response"

    @pytest.mark.asyncio
    @respx.mock
    async def test_uses_injected_client(self, weather_payload) -> None:
        respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=weather_payload))

        async with httpx.AsyncClient() as shared:
            client = OpenWeatherMapClient(api_key="k", base_url=BASE_URL + "/", client=shared)
            report = await client.fetch_current(1.0, 2.0)

        assert report.name == "Portland"


class TestWeatherFactory:
    def test_creates_client_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            settings,
            "weather",
            WeatherSettings(api_key="abc", base_url="http://owm.example", timeout_seconds=3.0),
        )

        client = create_weather_client()

        assert isinstance(client, OpenWeatherMapClient)
        assert client.base_url == "http://owm.example"
        assert client.timeout_seconds == 3.0

    def test_missing_api_key_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "weather", WeatherSettings(api_key=None))

        with pytest.raises(ConfigurationAppError, match="requires WEATHER_API_KEY") as exc:
            create_weather_client()
        assert exc.value.code == "weather_missing_api_key"
