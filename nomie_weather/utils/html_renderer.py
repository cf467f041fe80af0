"""HTML fragments rendered inside the Nomie app card.

Markup uses Nomie's ``nui-*`` list classes. Every interpolated value is
escaped.
"""

from __future__ import annotations

from html import escape

from nomie_weather.schemas.weather import WeatherReport
from nomie_weather.utils.units import Temperatures, format_reading


def _e(value: object) -> str:
    return escape(str(value), quote=True)


def _item(label: str, addon: str) -> str:
    return f"""
    <div class="nui-item">
        <div class="nui-item-content">
            <label>{_e(label)}</label>
        </div>
        <div class="nui-item-addon">
            {addon}
        </div>
    </div>"""


def render_summary_html(report: WeatherReport, temps: Temperatures) -> str:
    """Render the weather card.

    Args:
        report: Current weather.
        temps: Temperatures converted to the user's unit.

    Returns:
        str: HTML fragment.
    """
    description = report.description or ""
    low = _item("Low", _e(temps.low) + "&deg;")
    high = _item("High", _e(temps.high) + "&deg;")
    humidity = _item("Humidity", _e(format_reading(report.main.humidity)) + "%")
    pressure = _item("Pressure", _e(format_reading(report.main.pressure)))

    return f"""
<div class="nui-list">
    <div class="padding-off">
        <div class="current-temp padding-lg bg-primary text-center text-bold text-white border-radius">
            <label class="margin-lg-top">Current Temp</label>
            <div class="text-xxl text-thin">{_e(temps.current)}&deg;</div>
            <div class="text-sm text-thin text-white margin-lg-bottom">{_e(description)}</div>
        </div>
    </div>
    <div class="nui-item-divider">
        <label>Temps</label>
    </div>{low}{high}
    <div class="nui-item-divider">
        <label></label>
    </div>{humidity}{pressure}
</div>
""".strip()


def render_no_location_html() -> str:
    """Card shown when Nomie has no location for the user yet."""
    return """
<div class="nui-list">
    <div class="nui-item">
        <label>Current Location can't be found. Have you tracked recently?</label>
    </div>
</div>
""".strip()


def render_error_html(message: str) -> str:
    return f"Error happened {_e(message)}"
