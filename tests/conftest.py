"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

# 2024-01-15T12:00:00Z, 07:00 local in New York (UTC-5)
NOW_EPOCH = 1705320000
NEW_YORK_OFFSET = -18000
THREE_HOURS = 10800


@pytest.fixture(autouse=True)
def reset_settings_env() -> None:
    """Reset environment variables before each test."""
    # Store original env vars
    original_env = os.environ.copy()

    # Clear settings-related env vars
    for key in list(os.environ.keys()):
        if key.startswith(("OPENWEATHER_", "LOG_", "FORECAST_", "DAILY_", "REQUEST_", "USE_", "ENVIRONMENT")):
            del os.environ[key]

    yield

    # Restore original env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_settings_singleton() -> None:
    """Reset the settings singleton between tests."""
    from src.shared.config import settings as settings_module

    settings_module._settings = None

    yield

    settings_module._settings = None


@pytest.fixture
def current_payload() -> dict[str, Any]:
    """Current-weather response for New York."""
    return {
        "coord": {"lon": -74.006, "lat": 40.7128},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "base": "stations",
        "main": {
            "temp": 2.5,
            "feels_like": -1.2,
            "temp_min": 1.0,
            "temp_max": 4.0,
            "pressure": 1021,
            "humidity": 55,
        },
        "visibility": 10000,
        "wind": {"speed": 4.1, "deg": 225},
        "clouds": {"all": 0},
        "dt": NOW_EPOCH,
        "sys": {"type": 1, "id": 4610, "country": "US", "sunrise": 1705321740, "sunset": 1705356900},
        "timezone": NEW_YORK_OFFSET,
        "id": 5128581,
        "name": "New York",
        "cod": 200,
    }


@pytest.fixture
def make_forecast_item() -> Callable[..., dict[str, Any]]:
    """Factory for one forecast ``list[]`` element."""

    def _make(
        dt: int,
        temp: float = 5.0,
        temp_min: float | None = None,
        temp_max: float | None = None,
        description: str = "light rain",
        icon: str = "10d",
    ) -> dict[str, Any]:
        return {
            "dt": dt,
            "main": {
                "temp": temp,
                "feels_like": temp - 2,
                "temp_min": temp - 1 if temp_min is None else temp_min,
                "temp_max": temp + 1 if temp_max is None else temp_max,
                "pressure": 1015,
                "humidity": 70,
            },
            "weather": [{"id": 500, "main": "Rain", "description": description, "icon": icon}],
            "clouds": {"all": 75},
            "wind": {"speed": 3.2, "deg": 190},
            "visibility": 10000,
            "pop": 0.4,
            "sys": {"pod": "d"},
        }

    return _make


@pytest.fixture
def forecast_payload(make_forecast_item: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    """Forty 3-hourly samples from NOW_EPOCH, temperatures rising 0.5 per step.

    In UTC-5 these span six local dates: Jan 15 (6 samples), Jan 16-19
    (8 each) and Jan 20 (2).
    """
    return {
        "cod": "200",
        "message": 0,
        "cnt": 40,
        "list": [
            make_forecast_item(
                NOW_EPOCH + i * THREE_HOURS,
                temp=10 + i * 0.5,
                description=f"sample {i}",
                icon=f"{i % 4 + 1:02d}d",
            )
            for i in range(40)
        ],
        "city": {
            "id": 5128581,
            "name": "New York",
            "coord": {"lat": 40.7128, "lon": -74.006},
            "country": "US",
            "population": 8175133,
            "timezone": NEW_YORK_OFFSET,
            "sunrise": 1705321740,
            "sunset": 1705356900,
        },
    }


@pytest.fixture
def air_quality_payload() -> dict[str, Any]:
    """Air pollution response with AQI 2."""
    return {
        "coord": {"lon": -74.006, "lat": 40.7128},
        "list": [
            {
                "main": {"aqi": 2},
                "components": {"co": 230.31, "no2": 12.5, "o3": 45.1, "pm2_5": 3.2, "pm10": 5.1},
                "dt": NOW_EPOCH,
            }
        ],
    }


@pytest.fixture
def mock_client(
    current_payload: dict[str, Any],
    forecast_payload: dict[str, Any],
    air_quality_payload: dict[str, Any],
) -> MagicMock:
    """OpenWeatherClient stand-in returning the fixture payloads."""
    client = MagicMock()
    client.get_current_weather.return_value = current_payload
    client.get_forecast.return_value = forecast_payload
    client.get_air_quality.return_value = air_quality_payload
    return client
