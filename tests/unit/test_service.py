"""Unit tests for the weather fetch service."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from src.forecast.service import (
    VALID_TRANSITIONS,
    ErrorKind,
    FetchState,
    FetchStatus,
    WeatherService,
    describe_error,
)
from src.shared.api.errors import (
    APIError,
    AuthenticationError,
    ConnectionError,
    DataError,
    HTTPError,
    RateLimitError,
    TimeoutError,
)
from src.shared.config.settings import Settings

# 2024-01-15T12:00:00Z, 07:00 in New York
NOW_EPOCH = 1705320000


@pytest.fixture
def settings() -> Settings:
    """Settings with a dummy API key."""
    return Settings(openweather_api_key="test_key")


@pytest.fixture
def published() -> list[FetchState]:
    """Collects every state passed to the listener."""
    return []


@pytest.fixture
def service(mock_client: MagicMock, settings: Settings, published: list[FetchState]) -> WeatherService:
    """Service wired to the mock client with a fixed clock."""
    return WeatherService(
        client=mock_client,
        settings=settings,
        listener=published.append,
        clock=lambda: NOW_EPOCH,
    )


class TestFetchSuccess:
    """Test suite for successful fetches."""

    def test_fetch_weather_success(self, service: WeatherService, published: list[FetchState]) -> None:
        """Test a full fetch publishes Loading then Success."""
        state = service.fetch_weather("New York")

        assert state.status is FetchStatus.SUCCESS
        assert state.succeeded
        assert [s.status for s in published] == [FetchStatus.LOADING, FetchStatus.SUCCESS]
        assert published[0].is_loading
        assert service.state == state

    def test_display_uses_today_bucket(self, service: WeatherService) -> None:
        """Test high/low come from today's local bucket and sun times are known."""
        state = service.fetch_weather("New York")

        display = state.display
        assert display is not None
        assert display.city_name == "New York"
        # Six samples fall on Jan 15 local: mins 9.0..11.5, maxes 11.0..13.5
        assert display.low_temp == 9.0
        assert display.high_temp == 13.5
        assert not display.sunrise_unknown
        assert display.air_quality_index == 2

    def test_forecasts_shaped_by_settings(self, service: WeatherService) -> None:
        """Test 8 hourly entries and 5 daily entries starting with 'Today'."""
        state = service.fetch_weather("New York")

        assert len(state.hourly) == 8
        assert len(state.daily) == 5
        assert state.daily[0].day_label == "Today"
        assert [d.day_label for d in state.daily[1:]] == ["Tue", "Wed", "Thu", "Fri"]
        assert state.location is not None
        assert state.location.utc_offset_seconds == -18000

    def test_hourly_cadence_setting(self, mock_client: MagicMock) -> None:
        """Test an hourly provider yields 24 hourly entries."""
        service = WeatherService(
            client=mock_client,
            settings=Settings(openweather_api_key="k", forecast_cadence_hours=1, daily_forecast_days=3),
            clock=lambda: NOW_EPOCH,
        )

        state = service.fetch_weather("New York")

        assert len(state.hourly) == 24
        assert len(state.daily) == 3

    def test_city_is_trimmed(self, service: WeatherService, mock_client: MagicMock) -> None:
        """Test surrounding whitespace is stripped before the request."""
        service.fetch_weather("  London  ")

        mock_client.get_current_weather.assert_called_once_with(city="London")
        mock_client.get_forecast.assert_called_once_with(city="London")

    def test_fetch_by_coordinates(self, service: WeatherService, mock_client: MagicMock) -> None:
        """Test coordinate fetches pass lat/lon through."""
        state = service.fetch_weather_by_coordinates(40.7128, -74.006)

        assert state.succeeded
        mock_client.get_current_weather.assert_called_once_with(lat=40.7128, lon=-74.006)
        mock_client.get_air_quality.assert_called_once_with(40.7128, -74.006)


class TestFetchFailures:
    """Test suite for failed fetches."""

    @pytest.mark.parametrize(
        "error,kind,message",
        [
            (AuthenticationError(), ErrorKind.UNAUTHORIZED, "API key is invalid or expired"),
            (HTTPError("Not Found", status_code=404), ErrorKind.NOT_FOUND, "City not found"),
            (RateLimitError(), ErrorKind.RATE_LIMITED, "API rate limit exceeded"),
            (
                HTTPError("Service Unavailable", status_code=503),
                ErrorKind.SERVICE_UNAVAILABLE,
                "Weather service is temporarily unavailable",
            ),
            (DataError("bad body"), ErrorKind.DECODE, "Failed to parse weather data"),
            (HTTPError("I'm a teapot", status_code=418), ErrorKind.UNKNOWN, "I'm a teapot"),
        ],
    )
    def test_error_mapping(
        self,
        service: WeatherService,
        mock_client: MagicMock,
        published: list[FetchState],
        error: APIError,
        kind: ErrorKind,
        message: str,
    ) -> None:
        """Test each provider failure maps to its kind and message."""
        mock_client.get_current_weather.side_effect = error

        state = service.fetch_weather("Atlantis")

        assert state.status is FetchStatus.FAILED
        assert state.error_kind is kind
        assert state.error_message == message
        assert state.display is None
        assert [s.status for s in published] == [FetchStatus.LOADING, FetchStatus.FAILED]

    def test_network_error(self, service: WeatherService, mock_client: MagicMock) -> None:
        """Test transport failures are reported as network errors."""
        mock_client.get_current_weather.side_effect = TimeoutError(timeout_seconds=30)

        state = service.fetch_weather("London")

        assert state.error_kind is ErrorKind.NETWORK
        assert state.error_message.startswith("Network error:")

    def test_invalid_city(self, service: WeatherService, mock_client: MagicMock) -> None:
        """Test a rejected locator is an invalid request."""
        mock_client.get_current_weather.side_effect = ValueError("City name must not be blank")

        state = service.fetch_weather("   ")

        assert state.error_kind is ErrorKind.INVALID_REQUEST
        assert state.error_message == "Invalid city name"
        mock_client.get_forecast.assert_not_called()

    def test_undecodable_current_weather(
        self, service: WeatherService, mock_client: MagicMock, current_payload: dict[str, Any]
    ) -> None:
        """Test a current payload with missing fields fails the fetch."""
        del current_payload["main"]
        mock_client.get_current_weather.return_value = current_payload

        state = service.fetch_weather("London")

        assert state.status is FetchStatus.FAILED
        assert state.error_kind is ErrorKind.DECODE
        assert state.error_message == "Failed to parse weather data"

    def test_non_object_current_weather(
        self, service: WeatherService, mock_client: MagicMock, published: list[FetchState]
    ) -> None:
        """Test a list body for current conditions fails the fetch instead of raising."""
        mock_client.get_current_weather.return_value = []

        state = service.fetch_weather("London")

        assert state.status is FetchStatus.FAILED
        assert state.error_kind is ErrorKind.DECODE
        assert state.error_message == "Failed to parse weather data"
        assert service.state.status is FetchStatus.FAILED
        assert [s.status for s in published] == [FetchStatus.LOADING, FetchStatus.FAILED]

    def test_unexpected_error_leaves_loading(
        self, service: WeatherService, mock_client: MagicMock, published: list[FetchState]
    ) -> None:
        """Test an unexpected exception publishes Failed before propagating."""
        mock_client.get_current_weather.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            service.fetch_weather("London")

        assert service.state.status is FetchStatus.FAILED
        assert service.state.error_kind is ErrorKind.UNKNOWN
        assert service.state.error_message == "Unexpected error: boom"
        assert published[-1].status is FetchStatus.FAILED

    def test_describe_generic_error(self) -> None:
        """Test unclassified errors keep their own message."""
        kind, message = describe_error(APIError("something odd"))

        assert kind is ErrorKind.UNKNOWN
        assert message == "something odd"


class TestPartialFailures:
    """Test suite for degraded fetches."""

    def test_forecast_failure_still_succeeds(self, service: WeatherService, mock_client: MagicMock) -> None:
        """Test a forecast failure leaves forecasts empty and uses the fallback display."""
        mock_client.get_forecast.side_effect = HTTPError("Bad Gateway", status_code=502)

        state = service.fetch_weather("New York")

        assert state.succeeded
        assert state.hourly == ()
        assert state.daily == ()
        assert state.display is not None
        assert state.display.high_temp == state.display.low_temp == 2.5
        assert state.display.sunrise_unknown

    def test_empty_forecast_list(
        self, service: WeatherService, mock_client: MagicMock, forecast_payload: dict[str, Any]
    ) -> None:
        """Test an empty forecast list degrades the same way."""
        forecast_payload["list"] = []

        state = service.fetch_weather("New York")

        assert state.succeeded
        assert state.daily == ()

    def test_non_object_forecast_body(self, service: WeatherService, mock_client: MagicMock) -> None:
        """Test a list body from the forecast endpoint degrades like other forecast failures."""
        mock_client.get_forecast.return_value = [1, 2, 3]

        state = service.fetch_weather("New York")

        assert state.succeeded
        assert state.hourly == ()
        assert state.daily == ()
        assert state.display is not None
        assert state.display.sunrise_unknown

    def test_air_quality_failure_defaults_to_moderate(
        self, service: WeatherService, mock_client: MagicMock
    ) -> None:
        """Test a failed AQI lookup gives index 3."""
        mock_client.get_air_quality.side_effect = ConnectionError(endpoint="/air_pollution")

        state = service.fetch_weather("New York")

        assert state.succeeded
        assert state.display is not None
        assert state.display.air_quality_index == 3

    def test_air_quality_without_readings(
        self, service: WeatherService, mock_client: MagicMock
    ) -> None:
        """Test an empty AQI response gives index 3."""
        mock_client.get_air_quality.return_value = {"list": []}

        state = service.fetch_weather("New York")

        assert state.display is not None
        assert state.display.air_quality_index == 3


class TestFetchLifecycle:
    """Test suite for state transitions and superseded fetches."""

    def test_valid_transitions(self) -> None:
        """Test Idle can only move to Loading."""
        assert VALID_TRANSITIONS[FetchStatus.IDLE] == {FetchStatus.LOADING}
        assert FetchStatus.SUCCESS in VALID_TRANSITIONS[FetchStatus.LOADING]
        assert FetchStatus.SUCCESS not in VALID_TRANSITIONS[FetchStatus.FAILED]

    def test_initial_state_is_idle(self, service: WeatherService) -> None:
        """Test a new service starts Idle."""
        assert service.state.status is FetchStatus.IDLE

    def test_reset_after_success(self, service: WeatherService, published: list[FetchState]) -> None:
        """Test reset returns to Idle."""
        service.fetch_weather("New York")

        state = service.reset()

        assert state.status is FetchStatus.IDLE
        assert published[-1].status is FetchStatus.IDLE

    def test_reset_from_idle_is_ignored(self, service: WeatherService, published: list[FetchState]) -> None:
        """Test Idle -> Idle is not published."""
        service.reset()

        assert published == []

    def test_superseded_fetch_does_not_publish(
        self,
        service: WeatherService,
        mock_client: MagicMock,
        current_payload: dict[str, Any],
        published: list[FetchState],
    ) -> None:
        """Test a fetch overtaken by a newer one never publishes its completion."""
        calls: list[dict[str, Any]] = []

        def current_weather(**locator: Any) -> dict[str, Any]:
            calls.append(locator)
            if len(calls) == 1:
                # A second request starts and finishes while the first is in flight
                service.fetch_weather("Boston")
            return current_payload

        mock_client.get_current_weather.side_effect = current_weather

        first = service.fetch_weather("New York")

        assert first.sequence == 1
        assert [(s.status, s.sequence) for s in published] == [
            (FetchStatus.LOADING, 1),
            (FetchStatus.LOADING, 2),
            (FetchStatus.SUCCESS, 2),
        ]
        assert service.state.sequence == 2

    def test_sequences_increase(self, service: WeatherService) -> None:
        """Test each fetch takes a new sequence number."""
        first = service.fetch_weather("New York")
        second = service.fetch_weather("New York")

        assert second.sequence == first.sequence + 1
