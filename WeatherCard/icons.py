"""Icon selection for weather conditions."""
from typing import Dict, Optional, Tuple

ICON_CATEGORIES = ("clear", "clouds", "rain", "snow", "fog", "thunder")

# OpenWeather condition code groups: https://openweathermap.org/weather-conditions
# (lower inclusive, upper exclusive, category)
CONDITION_ID_RANGES = (
    (200, 300, "thunder"),
    (300, 600, "rain"),
    (600, 700, "snow"),
    (700, 800, "fog"),
)

ICON_GLYPHS: Dict[str, Tuple[str, ...]] = {
    "clear": (
        " \\ | / ",
        " - O - ",
        " / | \\ ",
    ),
    "clouds": (
        "  .--.  ",
        " (    ).",
        "(___.__)",
    ),
    "rain": (
        " (___) ",
        "  ' ' '",
        " ' ' ' ",
    ),
    "snow": (
        " (___) ",
        "  * * *",
        " * * * ",
    ),
    "fog": (
        " _ - _ ",
        "- _ - _",
        " _ - _ ",
    ),
    "thunder": (
        " (___) ",
        "   /_  ",
        "    /  ",
    ),
}

ICON_COLORS: Dict[str, Tuple[int, int, int]] = {
    "clear": (255, 200, 0),
    "clouds": (200, 200, 200),
    "rain": (0, 113, 255),
    "snow": (255, 255, 255),
    "fog": (150, 150, 150),
    "thunder": (255, 165, 0),
}


def icon_for(condition_id: Optional[int], condition_main: Optional[str]) -> str:
    """
    Pick the icon category for a weather condition.

    The numeric id decides when it falls in a known group; otherwise the
    condition label is matched (rain, cloud, anything else is clear).
    """
    if condition_id is not None:
        for lower, upper, category in CONDITION_ID_RANGES:
            if lower <= condition_id < upper:
                return category
        if condition_id == 800:
            return "clear"
        if condition_id > 800:
            return "clouds"

    main = (condition_main or "").lower()
    if "rain" in main:
        return "rain"
    if "cloud" in main:
        return "clouds"
    return "clear"
