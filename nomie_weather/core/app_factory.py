"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nomie_weather.api.routes import health_router, weather_router
from nomie_weather.core.config import settings
from nomie_weather.core.exception_handlers import setup_exception_handlers
from nomie_weather.core.logging import configure_logging
from nomie_weather.core.middleware import request_id_middleware

OPENAPI_TAGS = [
    {
        "name": "Weather",
        "description": "Nomie cloud app: descriptor and capture endpoints.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]


def _parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Nomie Weather Tracker",
        description=(
            "Nomie cloud app that looks up the weather at the user's last "
            "location, renders a summary card and, at most once per cooldown "
            "window, returns track commands for temperature, humidity and pressure."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        openapi_tags=OPENAPI_TAGS,
    )

    # Middleware
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_origins(settings.app.cors_allow_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(weather_router)
    app.include_router(health_router)

    return app
