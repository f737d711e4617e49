"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass
from typing import Optional

METRIC = "metric"
IMPERIAL = "imperial"
UNIT_SYSTEMS = (METRIC, IMPERIAL)


@dataclass(frozen=True)
class WeatherReport:
    """One successful current-weather lookup for a city."""
    name: str
    temp: Optional[float]
    feels_like: Optional[float]
    humidity: Optional[int]
    wind_speed: Optional[float]  # m/s as reported upstream
    condition_main: str  # e.g., "Clouds", "Rain", "Clear"
    condition_description: str  # e.g., "broken clouds", "light rain"
    timestamp: int  # UNIX timestamp (UTC) the observation was made
    timezone_offset: int  # Offset from UTC in seconds
    country_code: Optional[str] = None
    condition_id: Optional[int] = None
    units: str = METRIC  # unit system the report was requested in

    @property
    def location(self) -> str:
        """City name with the country code in parentheses when known."""
        if self.country_code:
            return f"{self.name} ({self.country_code})"
        return self.name
