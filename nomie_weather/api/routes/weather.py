from typing import Annotated, Any

from fastapi import APIRouter, Depends

from nomie_weather.core.config import settings
from nomie_weather.core.dependencies import get_weather_service
from nomie_weather.schemas.capture import CaptureEvent
from nomie_weather.schemas.cloud_app import CloudAppResponse
from nomie_weather.services.descriptor import APP_PATH, build_descriptor
from nomie_weather.services.weather_service import WeatherService

router = APIRouter(tags=["Weather"])


@router.get(APP_PATH)
async def get_descriptor() -> dict[str, Any]:
    """Return the app descriptor Nomie shows before the user installs the app."""
    return build_descriptor(settings.app.public_base_url)


@router.post(
    APP_PATH,
    response_model=CloudAppResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
async def capture_weather(
    capture: CaptureEvent,
    service: Annotated[WeatherService, Depends(get_weather_service)],
) -> CloudAppResponse:
    """Handle a capture event sent by Nomie.

    Looks up the weather for the user's last location and renders the card.
    Track commands are included only when the user's cooldown has elapsed
    and the new timestamp was stored; weather or store failures degrade the
    response instead of failing the request.

    Args:
        capture: Capture event body.
        service: Capture service (injected).

    Returns:
        CloudAppResponse: Card, title and, when granted, commands.
    """
    return await service.handle_capture(capture)
