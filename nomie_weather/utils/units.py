from dataclasses import dataclass

KELVIN_OFFSET = 273.15


def _fixed2(value: float) -> str:
    """Format with exactly two decimals (``21.849`` -> ``"21.85"``)."""
    return f"{value:.2f}"


@dataclass(frozen=True)
class Kelvin:
    """A temperature reading in Kelvin, rendered in the user's unit.

    Converted values are strings with two decimals, the way Nomie receives them.
    """

    value: float

    @property
    def celsius(self) -> str:
        return _fixed2(self.value - KELVIN_OFFSET)

    @property
    def fahrenheit(self) -> str:
        return _fixed2((self.value - KELVIN_OFFSET) * 9 / 5 + 32)

    def convert(self, unit: str) -> str:
        """Convert to ``unit``: "celcius"/"celsius" gives Celsius, anything else Fahrenheit.

        Args:
            unit: Unit name as chosen in the app's settings.

        Returns:
            str: Temperature with two decimals.
        """
        if unit.lower() in ("celcius", "celsius"):
            return self.celsius
        return self.fahrenheit


@dataclass(frozen=True)
class Temperatures:
    """Current, low and high temperatures already converted for display."""

    current: str
    low: str
    high: str


def convert_temperatures(temp: float, temp_min: float, temp_max: float, unit: str) -> Temperatures:
    return Temperatures(
        current=Kelvin(temp).convert(unit),
        low=Kelvin(temp_min).convert(unit),
        high=Kelvin(temp_max).convert(unit),
    )


def format_reading(value: float) -> str:
    """Render a raw provider reading; integral floats lose the ``.0`` (``54.0`` -> ``54``)."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
