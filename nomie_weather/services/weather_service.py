"""Capture handling: weather lookup, rendering and cooldown-gated commands.

This service turns one Nomie capture event into the cloud app response:
- no location: a hint card, nothing else
- weather lookup failure: an error card
- otherwise: the weather card, plus track commands when the user's cooldown
  has elapsed and the new timestamp was stored

The card is always delivered; gate failures only remove the commands.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from nomie_weather.adapters.weather.base import AbstractWeatherClient
from nomie_weather.adapters.weather.factory import create_weather_client
from nomie_weather.core.errors import (
    StoreUnavailableError,
    StoreWriteFailureError,
    WeatherAppError,
)
from nomie_weather.core.logging import hash_identifier
from nomie_weather.schemas.capture import CaptureEvent
from nomie_weather.schemas.cloud_app import CloudAppResponse
from nomie_weather.services.cooldown_gate import DEFAULT_COOLDOWN_MINUTES, CooldownGate
from nomie_weather.utils.commands import build_track_commands
from nomie_weather.utils.html_renderer import (
    render_error_html,
    render_no_location_html,
    render_summary_html,
)
from nomie_weather.utils.units import convert_temperatures

logger = logging.getLogger(__name__)

READ_FAILURE_MESSAGE = "User Initialization Failure"
WRITE_FAILURE_MESSAGE = "User Save Failure"


class WeatherService:
    """Orchestrates a capture: weather client, renderers and the cooldown gate.

    The weather client is built on first use when none is given, so captures
    without a location never need weather configuration.

    Attributes:
        gate: Cooldown gate guarding track commands.
        cooldown_minutes: Cooldown window passed to the gate.
    """

    def __init__(
        self,
        weather: AbstractWeatherClient | None,
        gate: CooldownGate,
        cooldown_minutes: float = DEFAULT_COOLDOWN_MINUTES,
        *,
        weather_factory: Callable[[], AbstractWeatherClient] = create_weather_client,
    ) -> None:
        self._weather = weather
        self._weather_factory = weather_factory
        self.gate = gate
        self.cooldown_minutes = cooldown_minutes

    @property
    def weather(self) -> AbstractWeatherClient:
        """Current-weather client.

        Raises:
            ConfigurationAppError: If the client has to be built and the
                provider is not configured.
        """
        if self._weather is None:
            self._weather = self._weather_factory()
        return self._weather

    async def _apply_gate(
        self,
        response: CloudAppResponse,
        identifier: str,
        commands: list[str],
        now: datetime | None,
    ) -> CloudAppResponse:
        """Attach commands only when the gate granted and persisted the run."""
        try:
            result = await self.gate.evaluate(identifier, now, self.cooldown_minutes)
        except StoreUnavailableError as exc:
            response.err = exc.code
            response.err_message = READ_FAILURE_MESSAGE
            return response
        except StoreWriteFailureError as exc:
            response.err = exc.code
            response.err_message = WRITE_FAILURE_MESSAGE
            return response

        response.age = result.elapsed_minutes
        if result.allowed:
            response.commands = commands
        return response

    async def handle_capture(
        self,
        capture: CaptureEvent,
        now: datetime | None = None,
    ) -> CloudAppResponse:
        """Build the cloud app response for a capture event.

        Args:
            capture: Parsed capture event.
            now: Evaluation time for the cooldown; defaults to the gate's clock.

        Returns:
            CloudAppResponse: Card plus, when granted, the track commands.
        """
        if not capture.has_valid_location:
            logger.info("capture.no_location")
            return CloudAppResponse(html=render_no_location_html())

        lat, lon = capture.coordinates
        try:
            report = await self.weather.fetch_current(lat, lon)
        except WeatherAppError as exc:
            return CloudAppResponse(
                html=render_error_html(exc.message),
                err=exc.code,
                err_message=exc.message,
            )

        temps = convert_temperatures(
            report.main.temp,
            report.main.temp_min,
            report.main.temp_max,
            capture.unit,
        )
        response = CloudAppResponse(
            title=f"{report.name} Weather",
            html=render_summary_html(report, temps),
        )
        commands = build_track_commands(capture, report, temps)

        if not (capture.anonid or "").strip():
            logger.info("capture.anonymous", extra={"command_count": len(commands)})
            return response

        response = await self._apply_gate(response, capture.anonid, commands, now)
        logger.info(
            "capture.handled",
            extra={
                "id_hash": hash_identifier(capture.anonid),
                "commands_sent": response.commands is not None,
                "command_count": len(commands),
                "error_code": response.err,
            },
        )
        return response
