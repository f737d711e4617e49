"""Shared fixtures for the weather card tests."""
import pytest
from weather_data import WeatherReport


@pytest.fixture
def make_report():
    """Factory for WeatherReport objects (London, clear, 10°C by default)."""
    def _make(**overrides):
        fields = dict(
            name="London",
            country_code="GB",
            temp=10.0,
            feels_like=8.5,
            humidity=50,
            wind_speed=5.0,
            condition_main="Clear",
            condition_description="clear sky",
            condition_id=800,
            timestamp=1700000000,
            timezone_offset=0,
        )
        fields.update(overrides)
        return WeatherReport(**fields)
    return _make


@pytest.fixture
def sample_openweather_response():
    """Sample OpenWeather Current Weather response for London."""
    return {
        "coord": {"lon": -0.13, "lat": 51.51},
        "weather": [
            {
                "id": 800,
                "main": "Clear",
                "description": "clear sky",
                "icon": "01d"
            }
        ],
        "base": "stations",
        "main": {
            "temp": 10.0,
            "feels_like": 8.5,
            "pressure": 1014,
            "humidity": 50
        },
        "visibility": 10000,
        "wind": {"speed": 5.0, "deg": 93},
        "clouds": {"all": 0},
        "dt": 1700000000,
        "sys": {"country": "GB"},
        "timezone": 0,
        "name": "London",
        "id": 2643743
    }
