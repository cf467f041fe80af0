"""Builders for Nomie track commands.

A command is the path form Nomie's API accepts, e.g.
``/action=track/label=Temp/value=71.60``.
"""

from __future__ import annotations

from nomie_weather.schemas.capture import CaptureEvent
from nomie_weather.schemas.weather import WeatherReport
from nomie_weather.utils.units import Temperatures, format_reading


def track_command(label: str, value: str) -> str:
    return f"/action=track/label={label}/value={value}"


def build_track_commands(
    capture: CaptureEvent,
    report: WeatherReport,
    temps: Temperatures,
) -> list[str]:
    """Build the track commands for every slot the user mapped to a tracker.

    Order is temperature, humidity, pressure. The temperature recorded is
    today's high when the user chose ``temp-max``, otherwise the current one.

    Args:
        capture: Parsed capture event.
        report: Current weather.
        temps: Temperatures converted to the user's unit.

    Returns:
        list[str]: Commands to hand back to Nomie (possibly empty).
    """
    commands: list[str] = []

    temp_label = capture.tracker_label("temp")
    if temp_label:
        value = temps.high if capture.record_high else temps.current
        commands.append(track_command(temp_label, value))

    humidity_label = capture.tracker_label("humidity")
    if humidity_label:
        commands.append(track_command(humidity_label, format_reading(report.main.humidity)))

    pressure_label = capture.tracker_label("pressure")
    if pressure_label:
        commands.append(track_command(pressure_label, format_reading(report.main.pressure)))

    return commands
