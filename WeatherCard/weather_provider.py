"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from weather_data import WeatherReport, METRIC

NOT_FOUND_MESSAGE = "City not found. Try a different name."
MISSING_KEY_MESSAGE = "Missing API key. Please add WEATHER_API_KEY to your environment or .env file."


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def get_current(self, query: str, units: str = METRIC) -> WeatherReport:
        """
        Fetch current weather for a city.

        Args:
            query: City name as typed by the user
            units: Unit system ("metric" or "imperial")

        Returns:
            WeatherReport: Current weather information

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    kind = "service"


class ConfigurationError(WeatherProviderError):
    """The provider cannot be used until its configuration is fixed."""
    kind = "configuration"

    def __init__(self, message: str = MISSING_KEY_MESSAGE):
        super().__init__(message)


class NotFoundError(WeatherProviderError):
    """The upstream service does not know the requested city."""
    kind = "not_found"

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message)


class ServiceError(WeatherProviderError):
    """Transport failure, bad payload, or any other non-success status."""
    kind = "service"

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
