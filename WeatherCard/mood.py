"""Unit conversion and mood classification - pure functions for testability."""
from typing import Dict, Optional, Tuple
from weather_data import METRIC

# (name, lower bound in Celsius); a bucket runs up to the next bound
TEMPERATURE_BUCKETS = (
    ("cold", float("-inf")),
    ("cool", 6.0),
    ("mild", 16.0),
    ("warm", 24.0),
    ("hot", 32.0),
)

# Checked in order, first match wins: (substrings, phrase per bucket, phrase otherwise)
CONDITION_RULES: Tuple[Tuple[Tuple[str, ...], Dict[str, str], str], ...] = (
    (("clear",), {"cold": "Crisp & Clear", "cool": "Crisp & Clear"}, "Sunny & Cheerful"),
    (("cloud",), {"cold": "Grey & Calm"}, "Cloudy & Calm"),
    (("rain", "drizzle"), {"cold": "Cozy & Rainy"}, "Wet & Refreshing"),
    (("snow",), {"cold": "Bundled & Snowy"}, "Snowy"),
    (("thunder",), {}, "Stormy & Intense"),
    (("mist", "fog"), {}, "Misty & Quiet"),
)
DEFAULT_MOOD = "Pleasant"
LIGHT_RAIN_MOOD = "Soft & Cozy"
HEAVY_RAIN_MOOD = "Blustery & Moody"


def ms_to_kmh(speed_ms: float) -> float:
    """Convert a wind speed from m/s to km/h."""
    return speed_ms * 3.6


def fahrenheit_to_celsius(temp_f: float) -> float:
    return (temp_f - 32) * 5.0 / 9.0


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 9.0 / 5.0 + 32


def temperature_bucket(temp_c: Optional[float]) -> str:
    """
    Bucket a Celsius temperature.

    Lower bounds are inclusive: 6.0 is "cool", 5.99 is "cold".
    A missing temperature counts as "mild".
    """
    if temp_c is None:
        return "mild"
    bucket = TEMPERATURE_BUCKETS[0][0]
    for name, lower in TEMPERATURE_BUCKETS:
        if temp_c >= lower:
            bucket = name
    return bucket


def classify(condition_main: Optional[str], description: Optional[str], temp_c: Optional[float]) -> str:
    """
    Derive a short mood phrase from the condition and a Celsius temperature.

    Callers holding Fahrenheit values must convert first.
    """
    condition = (condition_main or "").lower()
    detail = (description or "").lower()
    bucket = temperature_bucket(temp_c)

    mood = DEFAULT_MOOD
    for needles, by_bucket, phrase in CONDITION_RULES:
        if any(needle in condition for needle in needles):
            mood = by_bucket.get(bucket, phrase)
            break

    if "light" in detail and "Rain" in mood:
        mood = LIGHT_RAIN_MOOD
    if ("heavy" in detail or "shower" in detail) and "Rain" in mood:
        mood = HEAVY_RAIN_MOOD
    return mood


def format_wind(speed: Optional[float], units: str) -> str:
    """
    Format a wind speed reported in m/s.

    Metric converts to km/h. Imperial shows the raw m/s value unconverted,
    matching the long-standing card output.
    """
    unit = "km/h" if units == METRIC else "m/s"
    if speed is None:
        return f"- {unit}"
    if units == METRIC:
        speed = ms_to_kmh(speed)
    return f"{speed:.1f} {unit}"
