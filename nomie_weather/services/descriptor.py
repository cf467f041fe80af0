"""Cloud app descriptor ("join" payload).

Nomie fetches this document with a GET before the user installs the app, to
show a preview and to learn which options and tracker slots the app uses.
"""

from __future__ import annotations

from typing import Any

APP_ID = "io.nomie.apps.weather"
APP_PATH = "/apps/weather"
PRIMARY_COLOR = "#4A90E2"


def build_descriptor(public_base_url: str) -> dict[str, Any]:
    """Build the app descriptor with URLs rooted at ``public_base_url``.

    Args:
        public_base_url: Externally reachable base URL of this service.

    Returns:
        dict[str, Any]: JSON-serializable descriptor.
    """
    app_url = public_base_url.rstrip("/") + APP_PATH

    return {
        "id": APP_ID,
        "name": "Weather Tracker",
        "img": "http://snap.icorbin.com/weather-tracking.svg",
        "summary": "Automatically Track the Temp",
        "uses": ["last-location", "api", "geo", "commands"],
        "color": PRIMARY_COLOR,
        "hostedBy": "Brandon Corbin",
        "join": app_url,
        "more": "https://nomie.io",
        "collection": {
            "method": "automatic",
            "frequency": "1d",
            "url": app_url,
            "amount": "1d",
        },
        "leave": f"{app_url}/leave",
        "info": {
            "units": {
                "type": "select",
                "value": "fahrenheit",
                "options": [
                    {"label": "Fahrenheit", "value": "fahrenheit"},
                    {"label": "Celcius", "value": "celcius"},
                ],
                "label": "Unit of Measure",
            },
            "temptype": {
                "type": "select",
                "value": "temp-max",
                "options": [
                    {"label": "Today's High", "value": "temp-max"},
                    {"label": "Current Temp", "value": "temp"},
                ],
                "label": "Record",
            },
        },
        "slots": {
            "temp": {
                "label": "Temperature",
                "summary": None,
                "tracker": None,
                "required": True,
                "recommended": {
                    "label": "Temp",
                    "config": {"type": "numeric", "uom": "celsius", "math": "mean"},
                    "color": PRIMARY_COLOR,
                    "icon": "flaticon-thermometer21",
                },
            },
            "humidity": {
                "label": "Humidity",
                "tracker": None,
                "required": False,
                "recommended": {
                    "_id": "humidity",
                    "label": "Humidity",
                    "icon": "weather-snow-cloud",
                    "config": {
                        "type": "numeric",
                        "uom": None,
                        "dynamicCharge": False,
                        "chargeFunc": [],
                        "min": 1,
                        "max": 10,
                        "math": "mean",
                    },
                    "charge": 0,
                    "color": "#064070",
                    "lid": "custom.00fvux",
                },
            },
            "pressure": {
                "label": "Pressure",
                "tracker": None,
                "required": False,
                "recommended": {
                    "label": "Pressure",
                    "config": {"type": "numeric", "uom": None, "math": "mean"},
                    "color": PRIMARY_COLOR,
                    "icon": "flaticon-thermometer21",
                },
            },
        },
    }
