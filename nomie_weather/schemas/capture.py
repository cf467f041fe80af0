"""Pydantic schemas for the capture event Nomie posts to the cloud app.

Nomie sends a loosely structured document; every optional branch gets its
default here, once, so the rest of the service can read fields directly.
Branches sent as ``null`` get the same default as missing ones.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TemperatureUnit = Literal["fahrenheit", "celcius"]

CELSIUS_ALIASES = {"celcius", "celsius"}


def _default_units() -> SelectValue:
    return SelectValue(value="fahrenheit")


class SelectValue(BaseModel):
    """A user choice from one of the app's select inputs."""

    model_config = ConfigDict(extra="ignore")

    value: str | None = None


class ExperimentInfo(BaseModel):
    """User-configured options declared under ``info`` in the app descriptor."""

    model_config = ConfigDict(extra="ignore")

    units: SelectValue = Field(default_factory=_default_units)
    temptype: SelectValue = Field(default_factory=SelectValue)

    @field_validator("units", mode="before")
    @classmethod
    def _null_units(cls, value: Any) -> Any:
        return _default_units() if value is None else value

    @field_validator("temptype", mode="before")
    @classmethod
    def _null_temptype(cls, value: Any) -> Any:
        return SelectValue() if value is None else value


class Tracker(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: str


class Slot(BaseModel):
    """A slot the user mapped (or not) onto one of their trackers."""

    model_config = ConfigDict(extra="ignore")

    tracker: Tracker | None = None


class Experiment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    location: list[float] | None = Field(
        default=None,
        description="Last known [latitude, longitude] of the user.",
    )
    info: ExperimentInfo = Field(default_factory=ExperimentInfo)
    slots: dict[str, Slot | None] = Field(default_factory=dict)

    @field_validator("info", mode="before")
    @classmethod
    def _null_info(cls, value: Any) -> Any:
        return ExperimentInfo() if value is None else value

    @field_validator("slots", mode="before")
    @classmethod
    def _null_slots(cls, value: Any) -> Any:
        return {} if value is None else value


class CaptureEvent(BaseModel):
    """Body of the POST Nomie sends when the app runs."""

    model_config = ConfigDict(extra="ignore")

    anonid: str | None = Field(
        default=None,
        description="Anonymous, stable identifier of the Nomie user.",
    )
    experiment: Experiment = Field(default_factory=Experiment)

    @field_validator("experiment", mode="before")
    @classmethod
    def _null_experiment(cls, value: Any) -> Any:
        return Experiment() if value is None else value

    @property
    def has_valid_location(self) -> bool:
        location = self.experiment.location
        return location is not None and len(location) == 2

    @property
    def coordinates(self) -> tuple[float, float]:
        """(lat, lon); only meaningful when ``has_valid_location`` is True."""
        lat, lon = self.experiment.location or (0.0, 0.0)
        return lat, lon

    @property
    def unit(self) -> TemperatureUnit:
        value = (self.experiment.info.units.value or "").lower()
        return "celcius" if value in CELSIUS_ALIASES else "fahrenheit"

    @property
    def record_high(self) -> bool:
        """True when the user asked to record today's high instead of the current temp."""
        return self.experiment.info.temptype.value == "temp-max"

    def tracker_label(self, slot_name: str) -> str | None:
        slot = self.experiment.slots.get(slot_name)
        if slot is None or slot.tracker is None:
            return None
        return slot.tracker.label
