"""Tests for view model derivation."""
import pytest
from view_model import build_view_model, convert_temperature


def test_view_model_metric(make_report):
    """London at 10°C under clear skies."""
    view = build_view_model(make_report(), "metric")

    assert view.location == "London (GB)"
    assert view.temperature_display == 10
    assert view.feels_like_display == 9
    assert view.unit_symbol == "°C"
    assert view.humidity_display == "50%"
    assert view.wind_display == "18.0 km/h"
    assert view.mood == "Crisp & Clear"
    assert view.icon == "clear"


def test_view_model_imperial_report(make_report):
    """Fahrenheit reports are converted to Celsius for the mood only."""
    report = make_report(temp=95.0, feels_like=99.4, units="imperial")
    view = build_view_model(report, "imperial")

    assert view.temperature_display == 95
    assert view.feels_like_display == 99
    assert view.unit_symbol == "°F"
    assert view.mood == "Sunny & Cheerful"  # 35°C is hot
    assert view.wind_display == "5.0 m/s"


def test_view_model_unit_toggle_converts_locally(make_report):
    """Switching units re-derives temperatures from the held report."""
    report = make_report(temp=20.0, feels_like=-40.0)
    view = build_view_model(report, "imperial")

    assert view.temperature_display == 68
    assert view.feels_like_display == -40
    assert view.unit_symbol == "°F"
    assert view.mood == "Sunny & Cheerful"


def test_view_model_rounds_half_up(make_report):
    """Temperatures round to the nearest whole unit, halves upwards."""
    assert build_view_model(make_report(temp=10.5), "metric").temperature_display == 11
    assert build_view_model(make_report(temp=-2.5), "metric").temperature_display == -2
    assert build_view_model(make_report(temp=-2.6), "metric").temperature_display == -3


def test_view_model_missing_values(make_report):
    """Missing upstream values render as dashes."""
    view = build_view_model(make_report(temp=None, feels_like=None, humidity=None, wind_speed=None), "metric")

    assert view.temperature_display is None
    assert view.humidity_display == "-"
    assert view.wind_display == "- km/h"
    assert view.mood == "Sunny & Cheerful"  # missing temperature counts as mild


def test_view_model_icon_uses_condition_id(make_report):
    """Icon follows the condition id."""
    view = build_view_model(make_report(condition_id=502, condition_main="Rain",
                                        condition_description="heavy intensity rain", temp=3.0), "metric")
    assert view.icon == "rain"
    assert view.mood == "Blustery & Moody"


def test_view_model_is_pure(make_report):
    """Equal inputs give equal view models."""
    assert build_view_model(make_report(), "metric") == build_view_model(make_report(), "metric")


def test_view_model_rejects_unknown_units(make_report):
    """Only metric and imperial are supported."""
    with pytest.raises(ValueError):
        build_view_model(make_report(), "kelvin")


def test_convert_temperature():
    """Test temperature conversion between unit systems."""
    assert convert_temperature(0.0, "metric", "imperial") == pytest.approx(32.0)
    assert convert_temperature(212.0, "imperial", "metric") == pytest.approx(100.0)
    assert convert_temperature(12.0, "metric", "metric") == 12.0
    assert convert_temperature(None, "metric", "imperial") is None
