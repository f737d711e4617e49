"""Tests for OpenWeather provider."""
import pytest
import requests
from unittest.mock import Mock, patch
from openweather_provider import OpenWeatherProvider
from weather_provider import ConfigurationError, NotFoundError, ServiceError, WeatherProviderError
from weather_data import WeatherReport


@pytest.fixture
def provider():
    """Create OpenWeather provider instance."""
    return OpenWeatherProvider(api_key="test_key", timeout=5)


def ok_response(payload):
    mock_response = Mock()
    mock_response.ok = True
    mock_response.status_code = 200
    mock_response.json.return_value = payload
    return mock_response


def test_openweather_provider_success(provider, sample_openweather_response):
    """Test successful API call and parsing."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(sample_openweather_response)

        report = provider.get_current("London", "metric")

        assert isinstance(report, WeatherReport)
        assert report.name == "London"
        assert report.country_code == "GB"
        assert report.condition_id == 800
        assert report.condition_main == "Clear"
        assert report.condition_description == "clear sky"
        assert report.temp == 10.0
        assert report.feels_like == 8.5
        assert report.humidity == 50
        assert report.wind_speed == 5.0
        assert report.timestamp == 1700000000
        assert report.timezone_offset == 0
        assert report.units == "metric"


def test_openweather_provider_request_parameters(provider, sample_openweather_response):
    """Query, units and credential are sent as query parameters."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(sample_openweather_response)

        provider.get_current("São Paulo", "imperial")

        args, kwargs = mock_get.call_args
        assert args[0] == OpenWeatherProvider.BASE_URL
        assert kwargs["params"]["q"] == "São Paulo"
        assert kwargs["params"]["units"] == "imperial"
        assert kwargs["params"]["appid"] == "test_key"
        assert kwargs["timeout"] == 5


def test_openweather_provider_optional_fields(provider):
    """Country and condition id are optional."""
    response = {
        "weather": [{"main": "Clouds", "description": "few clouds"}],
        "main": {"temp": 20.5, "feels_like": 19.8, "humidity": 65},
        "wind": {"speed": 5.2},
        "dt": 1684929490,
        "timezone": -18000,
        "name": "Testville"
    }

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(response)

        report = provider.get_current("Testville")

        assert report.country_code is None
        assert report.condition_id is None
        assert report.timezone_offset == -18000


def test_openweather_provider_not_found(provider):
    """A 404 means the city is unknown."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 404
        mock_response.reason = "Not Found"
        mock_response.json.return_value = {"cod": "404", "message": "city not found"}
        mock_get.return_value = mock_response

        with pytest.raises(NotFoundError) as exc_info:
            provider.get_current("Nowhere123")

        assert str(exc_info.value) == "City not found. Try a different name."
        assert exc_info.value.kind == "not_found"


def test_openweather_provider_http_error(provider):
    """Other HTTP errors become service errors carrying the status."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 401
        mock_response.reason = "Unauthorized"
        mock_response.json.return_value = {
            "cod": 401,
            "message": "Invalid API key"
        }
        mock_get.return_value = mock_response

        with pytest.raises(ServiceError) as exc_info:
            provider.get_current("London")

        assert str(exc_info.value) == "Weather API error: Unauthorized (401)"
        assert exc_info.value.status_code == 401


def test_openweather_provider_non_json_error(provider):
    """Error bodies that are not JSON still map to a service error."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 502
        mock_response.reason = "Bad Gateway"
        mock_response.text = "<html>bad gateway</html>"
        mock_response.json.side_effect = ValueError("No JSON")
        mock_get.return_value = mock_response

        with pytest.raises(ServiceError) as exc_info:
            provider.get_current("London")

        assert "502" in str(exc_info.value)


def test_openweather_provider_network_error(provider):
    """Test handling of network errors."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.side_effect = requests.exceptions.ConnectionError("Connection timeout")

        with pytest.raises(ServiceError) as exc_info:
            provider.get_current("London")

        assert "Network error" in str(exc_info.value)


def test_openweather_provider_missing_main(provider):
    """Test handling of missing main block."""
    response = {
        "weather": [
            {
                "main": "Clear",
                "description": "clear sky"
            }
        ]
    }

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(response)

        with pytest.raises(ServiceError) as exc_info:
            provider.get_current("London")

        assert "missing 'main' block" in str(exc_info.value)


def test_openweather_provider_missing_weather(provider):
    """Test handling of missing 'weather' array."""
    response = {
        "main": {"temp": 20.0},
        "dt": 1684929490,
        "timezone": -18000,
        "weather": []
    }

    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response(response)

        with pytest.raises(ServiceError) as exc_info:
            provider.get_current("London")

        assert "missing 'weather' array" in str(exc_info.value)


def test_openweather_provider_invalid_json(provider):
    """A success status with an unreadable body is a service error."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = ok_response(None)
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_response

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.get_current("London")

        assert "Failed to parse response" in str(exc_info.value)


def test_openweather_provider_without_key_makes_no_request():
    """No credential, no network call."""
    provider = OpenWeatherProvider(api_key=None)

    with patch('openweather_provider.requests.get') as mock_get:
        with pytest.raises(ConfigurationError):
            provider.get_current("Tokyo")

        mock_get.assert_not_called()


def test_openweather_provider_network_error_hides_api_key():
    """The credential echoed in a failing URL never reaches the message or the log."""
    provider = OpenWeatherProvider(api_key="SECRETKEY123")
    failure = requests.exceptions.ConnectionError(
        "HTTPConnectionPool(host='127.0.0.1', port=9): Max retries exceeded with url: "
        "/data/2.5/weather?q=London&units=metric&appid=SECRETKEY123&lang=en"
    )

    with patch('openweather_provider.requests.get') as mock_get, \
            patch('openweather_provider.logging') as mock_logging:
        mock_get.side_effect = failure

        with pytest.raises(ServiceError) as exc_info:
            provider.get_current("London")

    message = str(exc_info.value)
    assert "Network error" in message
    assert "SECRETKEY123" not in message
    assert "appid=***" in message
    logged = " ".join(str(call) for call in mock_logging.error.call_args_list)
    assert "SECRETKEY123" not in logged


def test_openweather_provider_non_object_json(provider):
    """A JSON body that is not an object is a parse failure."""
    with patch('openweather_provider.requests.get') as mock_get:
        mock_get.return_value = ok_response([])

        with pytest.raises(ServiceError) as exc_info:
            provider.get_current("London")

        assert "Failed to parse response" in str(exc_info.value)
