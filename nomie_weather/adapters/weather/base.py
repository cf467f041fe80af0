from abc import ABC, abstractmethod

from nomie_weather.schemas.weather import WeatherReport


class AbstractWeatherClient(ABC):
	"""Interface for current-weather providers."""

	@abstractmethod
	async def fetch_current(self, lat: float, lon: float) -> WeatherReport:
		"""Fetch current conditions for a coordinate.

		Args:
			lat: Latitude in decimal degrees.
			lon: Longitude in decimal degrees.

		Returns:
			WeatherReport: Parsed provider response (temperatures in Kelvin).

		Raises:
			WeatherAppError: If the provider call fails or the response cannot be parsed.
		"""
		...
