"""Pydantic schemas for the OpenWeatherMap current-weather payload.

Only the fields the service reads are modelled; everything else in the
provider response is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WeatherMain(BaseModel):
    """Main measurements block. Temperatures are in Kelvin."""

    model_config = ConfigDict(extra="ignore")

    temp: float = Field(..., description="Current temperature (K).")
    temp_min: float = Field(..., description="Minimum temperature observed right now (K).")
    temp_max: float = Field(..., description="Maximum temperature observed right now (K).")
    humidity: float = Field(..., description="Relative humidity (%).")
    pressure: float = Field(..., description="Atmospheric pressure (hPa).")


class WeatherCondition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    main: str | None = None
    description: str | None = None


class WeatherReport(BaseModel):
    """Current weather for one location."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field("", description="City name reported by the provider.")
    main: WeatherMain
    weather: list[WeatherCondition] = Field(default_factory=list)

    @property
    def description(self) -> str | None:
        """Headline condition (e.g. "Clouds"), if the provider sent one."""
        if not self.weather:
            return None
        return self.weather[0].main
