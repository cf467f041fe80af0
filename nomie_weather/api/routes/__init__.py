from __future__ import annotations

from nomie_weather.api.routes.health import router as health_router
from nomie_weather.api.routes.weather import router as weather_router

__all__ = ["health_router", "weather_router"]
