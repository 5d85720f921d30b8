"""OpenWeatherMap API client.

Fetches current weather, the 5-day/3-hour forecast and air pollution data
from api.openweathermap.org. Responses are returned as raw JSON dicts; the
forecast decoder turns them into typed records. The client never retries.
"""

from typing import Any

import requests

from src.shared.api.errors import DataError, ErrorCode, classify_error
from src.shared.config.logging import get_logger
from src.shared.config.settings import get_settings
from src.shared.constants import (
    AIR_QUALITY_ENDPOINT,
    CURRENT_WEATHER_ENDPOINT,
    FORECAST_ENDPOINT,
)

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "Weather360/1.0"


class OpenWeatherClient:
    """Client for the OpenWeatherMap data API.

    Locations are given either as a city name (provider-side geocoding) or
    as latitude/longitude.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        units: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize OpenWeatherMap client.

        Args:
            api_key: API key (appid); defaults to settings
            base_url: Data API base URL; defaults to settings
            units: "standard", "metric" or "imperial"; defaults to settings
            timeout: Request timeout in seconds; defaults to settings
            session: Optional pre-configured requests session
        """
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openweather_api_key
        self.base_url = (base_url or settings.openweather_base_url).rstrip("/")
        self.units = units or settings.openweather_units
        self.timeout = timeout or settings.request_timeout_seconds

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"})

        logger.info(
            "openweather_client_initialized",
            base_url=self.base_url,
            units=self.units,
            has_api_key=bool(self.api_key),
        )

    def _make_request(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """Make HTTP GET request to the API.

        Args:
            endpoint: API endpoint path (without base URL)
            params: Query parameters (appid is added here)

        Returns:
            JSON response as dictionary

        Raises:
            APIError: Classified network, HTTP or data error
        """
        url = f"{self.base_url}{endpoint}"
        query = {**params, "appid": self.api_key}

        # Never log the API key
        logger.debug("openweather_request", url=url, params=params)

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            logger.error(
                "openweather_request_failed",
                url=url,
                status=e.response.status_code if e.response is not None else None,
                error=str(e),
            )
            raise classify_error(e, endpoint=endpoint) from e
        except requests.JSONDecodeError as e:
            logger.error("openweather_invalid_json", url=url, error=str(e))
            raise DataError(
                message="Response body is not valid JSON",
                error_code=ErrorCode.DATA_PARSE_ERROR,
                endpoint=endpoint,
                details={"error": str(e)},
            ) from e
        except requests.RequestException as e:
            logger.error("openweather_request_error", url=url, error=str(e))
            raise classify_error(e, endpoint=endpoint) from e

        logger.debug("openweather_request_success", url=url, status=response.status_code)
        return data

    @staticmethod
    def _location_params(
        city: str | None,
        lat: float | None,
        lon: float | None,
    ) -> dict[str, Any]:
        """Build location query parameters.

        Raises:
            ValueError: Unless exactly one of city or lat+lon is given
        """
        has_coords = lat is not None and lon is not None
        if city is not None and (lat is not None or lon is not None):
            raise ValueError("Pass either a city name or coordinates, not both")
        if city is not None:
            if not city.strip():
                raise ValueError("City name must not be blank")
            return {"q": city.strip()}
        if has_coords:
            return {"lat": lat, "lon": lon}
        raise ValueError("A city name or both lat and lon are required")

    def get_current_weather(
        self,
        city: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
    ) -> dict[str, Any]:
        """Get current conditions for a city or coordinates.

        Args:
            city: City name, e.g. "London" or "London,GB"
            lat: Latitude
            lon: Longitude

        Returns:
            Raw current-weather payload

        Example:
            >>> client = OpenWeatherClient(api_key="...")
            >>> data = client.get_current_weather(city="London")
            >>> data["main"]["temp"]
        """
        params = {**self._location_params(city, lat, lon), "units": self.units}

        logger.info("fetching_current_weather", city=city, lat=lat, lon=lon)

        return self._make_request(CURRENT_WEATHER_ENDPOINT, params)

    def get_forecast(
        self,
        city: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
    ) -> dict[str, Any]:
        """Get the 5-day/3-hour forecast for a city or coordinates.

        Args:
            city: City name
            lat: Latitude
            lon: Longitude

        Returns:
            Raw forecast payload with ``list`` and ``city``
        """
        params = {**self._location_params(city, lat, lon), "units": self.units}

        logger.info("fetching_forecast", city=city, lat=lat, lon=lon)

        return self._make_request(FORECAST_ENDPOINT, params)

    def get_air_quality(self, lat: float, lon: float) -> dict[str, Any]:
        """Get current air pollution data for coordinates.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Raw air pollution payload
        """
        logger.debug("fetching_air_quality", lat=lat, lon=lon)

        return self._make_request(AIR_QUALITY_ENDPOINT, {"lat": lat, "lon": lon})

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
