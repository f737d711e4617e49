"""OpenWeather Current Weather API provider implementation."""
import logging
import requests
from typing import Optional
from weather_provider import (
    WeatherProviderBase,
    WeatherProviderError,
    ConfigurationError,
    NotFoundError,
    ServiceError,
)
from weather_data import WeatherReport, METRIC, UNIT_SYSTEMS


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API.

    Looks a city up by name: https://openweathermap.org/current#name
    Wind speed is treated as m/s whatever unit system is requested.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: Optional[str],
        lang: str = "en",
        timeout: int = 10,
        base_url: Optional[str] = None
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key (None if not configured)
            lang: Language code for descriptions (e.g., "en", "de")
            timeout: HTTP request timeout in seconds
            base_url: Override for the endpoint (tests, proxies)
        """
        self.api_key = api_key
        self.lang = lang
        self.timeout = timeout
        self.base_url = base_url or self.BASE_URL

    def get_current(self, query: str, units: str = METRIC) -> WeatherReport:
        """
        Fetch current weather for a city from OpenWeather.

        Returns:
            WeatherReport: Current weather information

        Raises:
            ConfigurationError: If no API key is configured
            NotFoundError: If the city is unknown upstream (HTTP 404)
            ServiceError: On network failures, other HTTP errors or bad payloads
        """
        if not self.api_key:
            raise ConfigurationError()
        if units not in UNIT_SYSTEMS:
            raise ValueError(f"Unsupported unit system: {units}")

        params = {
            "q": query,
            "units": units,
            "appid": self.api_key,
            "lang": self.lang,
        }

        try:
            logging.info(f"Making OpenWeather API request: {self.base_url}")
            logging.debug(f"Request parameters: q={query}, units={units}, lang={self.lang}")

            response = requests.get(self.base_url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            report = self._parse(data, units)

            logging.info(f"Successfully parsed weather for {report.location}: {report.temp}, {report.condition_main}")
            return report

        except WeatherProviderError:
            raise
        except requests.exceptions.RequestException as e:
            detail = self._redact(str(e))
            logging.error(f"Network error during API request: {detail}")
            raise ServiceError(f"Network error: {detail}")
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise ServiceError(f"Failed to parse response: {str(e)}")

    def _redact(self, text: str) -> str:
        """Mask the API key, which requests echoes back in failing URLs."""
        if self.api_key:
            text = text.replace(self.api_key, "***")
        return text

    def _parse(self, data: dict, units: str) -> WeatherReport:
        """Map a Current Weather payload onto a WeatherReport."""
        weather_array = data.get("weather") or []
        if not weather_array:
            logging.error("Response missing 'weather' array")
            raise ServiceError("Response missing 'weather' array")
        weather = weather_array[0]
        logging.debug(f"Weather condition: {weather.get('id')} {weather.get('main')} - {weather.get('description')}")

        main_data = data.get("main")
        if not main_data:
            raise ServiceError("Response missing 'main' block")

        wind_data = data.get("wind") or {}
        sys_data = data.get("sys") or {}
        condition_id = weather.get("id")

        return WeatherReport(
            name=data.get("name", ""),
            country_code=sys_data.get("country") or None,
            condition_main=weather.get("main", ""),
            condition_description=weather.get("description", ""),
            condition_id=int(condition_id) if condition_id is not None else None,
            temp=main_data.get("temp"),
            feels_like=main_data.get("feels_like"),
            humidity=main_data.get("humidity"),
            wind_speed=wind_data.get("speed"),
            timestamp=int(data.get("dt", 0)),
            timezone_offset=int(data.get("timezone", 0)),
            units=units,
        )

    def _handle_error_response(self, response: requests.Response) -> None:
        """Raise the error matching a non-success OpenWeather response."""
        try:
            error_data = response.json()
            logging.error(f"OpenWeather API error response: {error_data}")
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")

        if response.status_code == 404:
            raise NotFoundError()

        reason = response.reason or "Unknown error"
        raise ServiceError(
            f"Weather API error: {reason} ({response.status_code})",
            status_code=response.status_code,
        )
