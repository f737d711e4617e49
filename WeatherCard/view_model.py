"""Display-ready values derived from a WeatherReport and a unit system."""
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from icons import icon_for
from mood import celsius_to_fahrenheit, classify, fahrenheit_to_celsius, format_wind
from weather_data import WeatherReport, METRIC, IMPERIAL, UNIT_SYSTEMS


@dataclass(frozen=True)
class ViewModel:
    location: str
    condition_main: str
    condition_description: str
    temperature_display: Optional[int]
    feels_like_display: Optional[int]
    unit_symbol: str
    humidity_display: str
    wind_display: str
    mood: str
    icon: str


def convert_temperature(value: Optional[float], from_units: str, to_units: str) -> Optional[float]:
    """Convert a temperature between unit systems (no-op when they match)."""
    if value is None or from_units == to_units:
        return value
    if to_units == IMPERIAL:
        return celsius_to_fahrenheit(value)
    return fahrenheit_to_celsius(value)


def _rounded(value: Optional[float]) -> Optional[int]:
    # JS Math.round semantics (halves go up) rather than banker's rounding
    if value is None:
        return None
    return int(math.floor(value + 0.5))


@lru_cache(maxsize=64)
def build_view_model(report: WeatherReport, units: str = METRIC) -> ViewModel:
    """
    Derive the view model for a report shown in the given unit system.

    Pure: the cache only saves recomputation on clock ticks and redraws.
    Temperatures are converted locally if the report was fetched in the
    other unit system; the mood is always classified on Celsius.
    """
    if units not in UNIT_SYSTEMS:
        raise ValueError(f"Unsupported unit system: {units}")

    temp = convert_temperature(report.temp, report.units, units)
    feels_like = convert_temperature(report.feels_like, report.units, units)
    temp_c = convert_temperature(report.temp, report.units, METRIC)

    return ViewModel(
        location=report.location,
        condition_main=report.condition_main,
        condition_description=report.condition_description,
        temperature_display=_rounded(temp),
        feels_like_display=_rounded(feels_like),
        unit_symbol="°C" if units == METRIC else "°F",
        humidity_display=f"{report.humidity}%" if report.humidity is not None else "-",
        wind_display=format_wind(report.wind_speed, units),
        mood=classify(report.condition_main, report.condition_description, temp_c),
        icon=icon_for(report.condition_id, report.condition_main),
    )
