"""Runtime configuration, loaded once at startup."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from openweather_provider import OpenWeatherProvider
from weather_data import METRIC, UNIT_SYSTEMS


@dataclass(frozen=True)
class WeatherSettings:
    """Explicit configuration handed to the provider and fetch controller."""
    api_key: Optional[str]
    units: str = METRIC
    lang: str = "en"
    timeout: int = 10
    base_url: str = OpenWeatherProvider.BASE_URL

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)


def load_settings(
    units: str = METRIC,
    timeout: int = 10,
    env_file: Optional[str] = None
) -> WeatherSettings:
    """
    Read settings from the environment (and a .env file, if present).

    A missing WEATHER_API_KEY is not fatal: the card starts and reports a
    configuration error for every lookup.
    """
    load_dotenv(env_file)
    api_key = os.getenv("WEATHER_API_KEY") or None
    lang = os.getenv("WEATHER_LANG", "en")
    base_url = os.getenv("WEATHER_BASE_URL") or OpenWeatherProvider.BASE_URL

    if units not in UNIT_SYSTEMS:
        raise SystemExit(f"Invalid units: {units}")
    if timeout <= 0:
        raise SystemExit(f"Invalid timeout: {timeout}")

    if not api_key:
        logging.warning("WEATHER_API_KEY is not set; lookups will fail until it is configured")
    logging.info("Configuration loaded: units=%s lang=%s timeout=%ss", units, lang, timeout)
    return WeatherSettings(
        api_key=api_key,
        units=units,
        lang=lang,
        timeout=timeout,
        base_url=base_url,
    )


def build_provider(settings: WeatherSettings) -> OpenWeatherProvider:
    return OpenWeatherProvider(
        api_key=settings.api_key,
        lang=settings.lang,
        timeout=settings.timeout,
        base_url=settings.base_url,
    )
