"""Weather adapter layer - abstracts over the current-weather provider."""

from nomie_weather.adapters.weather.base import AbstractWeatherClient
from nomie_weather.adapters.weather.factory import create_weather_client
from nomie_weather.adapters.weather.openweathermap import OpenWeatherMapClient

__all__ = [
    "AbstractWeatherClient",
    "OpenWeatherMapClient",
    "create_weather_client",
]
