"""Response models for the OpenWeatherMap API.

Pydantic models for parsing and validating current-weather, forecast and
air-quality responses. Unknown fields are ignored; optional fields that the
provider omits stay ``None`` rather than defaulting to zero.
"""

from pydantic import BaseModel, ConfigDict, Field


class ProviderModel(BaseModel):
    """Base for provider payload models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# ============================================================================
# Shared blocks
# ============================================================================


class Coordinates(ProviderModel):
    """Geographic coordinates of the resolved location."""

    lon: float = Field(..., ge=-180, le=180, description="Longitude")
    lat: float = Field(..., ge=-90, le=90, description="Latitude")


class WeatherCondition(ProviderModel):
    """One entry of the provider's ``weather[]`` array."""

    id: int = Field(..., description="Condition id (e.g. 803)")
    main: str = Field(..., description="Condition group (e.g. 'Clouds')")
    description: str = Field(..., description="Condition description")
    icon: str = Field(..., description="Icon id (e.g. '04d')")


class MainReadings(ProviderModel):
    """Temperature, pressure and humidity block (``main``)."""

    temp: float = Field(..., description="Temperature in requested units")
    feels_like: float = Field(..., description="Perceived temperature")
    temp_min: float = Field(..., description="Minimum temperature")
    temp_max: float = Field(..., description="Maximum temperature")
    pressure: int = Field(..., description="Atmospheric pressure in hPa")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity %")
    sea_level: int | None = Field(None, description="Sea level pressure in hPa")
    grnd_level: int | None = Field(None, description="Ground level pressure in hPa")


class Wind(ProviderModel):
    """Wind block."""

    speed: float = Field(..., description="Wind speed (m/s for metric)")
    deg: int = Field(..., description="Wind direction in degrees")
    gust: float | None = Field(None, description="Wind gust")


class Clouds(ProviderModel):
    """Cloudiness block."""

    all: int = Field(..., description="Cloudiness %")


# ============================================================================
# Current weather (/weather)
# ============================================================================


class CurrentSystem(ProviderModel):
    """``sys`` block of the current-weather response."""

    type: int | None = Field(None, description="Internal provider parameter")
    id: int | None = Field(None, description="Internal provider parameter")
    country: str = Field(..., description="Country code")
    sunrise: int = Field(..., description="Sunrise, unix UTC")
    sunset: int = Field(..., description="Sunset, unix UTC")


class CurrentWeather(ProviderModel):
    """Current conditions response model."""

    coord: Coordinates
    weather: list[WeatherCondition] = Field(..., description="Conditions, primary first")
    base: str | None = Field(None, description="Internal provider parameter")
    main: MainReadings
    visibility: int | None = Field(None, description="Visibility in meters")
    wind: Wind
    clouds: Clouds
    dt: int = Field(..., description="Observation time, unix UTC")
    sys: CurrentSystem
    timezone: int = Field(..., ge=-50400, le=50400, description="Shift in seconds from UTC")
    id: int | None = Field(None, description="City id")
    name: str = Field(..., description="City name")
    cod: int | None = Field(None, description="Internal provider parameter")

    @property
    def primary_condition(self) -> WeatherCondition | None:
        """First entry of ``weather[]``, if any."""
        return self.weather[0] if self.weather else None


# ============================================================================
# 5-day / 3-hour forecast (/forecast)
# ============================================================================


class ForecastPartOfDay(ProviderModel):
    """``sys`` block of a forecast item."""

    pod: str = Field(..., description="Part of day: 'd' or 'n'")


class ForecastItem(ProviderModel):
    """One element of the forecast ``list[]``."""

    dt: int = Field(..., description="Forecast time, unix UTC")
    main: MainReadings
    weather: list[WeatherCondition]
    clouds: Clouds
    wind: Wind
    visibility: int | None = Field(None, description="Visibility in meters")
    pop: float | None = Field(None, ge=0, le=1, description="Probability of precipitation")
    sys: ForecastPartOfDay | None = None
    dt_txt: str | None = Field(None, description="Forecast time, 'YYYY-MM-DD HH:MM:SS' UTC")


class ForecastCity(ProviderModel):
    """``city`` block of the forecast response."""

    id: int | None = Field(None, description="City id")
    name: str = Field(..., description="City name")
    coord: Coordinates
    country: str = Field(..., description="Country code")
    population: int | None = Field(None, description="City population")
    timezone: int = Field(..., ge=-50400, le=50400, description="Shift in seconds from UTC")
    sunrise: int = Field(..., description="Sunrise, unix UTC")
    sunset: int = Field(..., description="Sunset, unix UTC")


class ForecastResponse(ProviderModel):
    """Forecast response model."""

    items: list[ForecastItem] = Field(
        ..., alias="list", description="Forecast items, ascending by dt"
    )
    city: ForecastCity


# ============================================================================
# Air pollution (/air_pollution)
# ============================================================================


class AirQualityMain(ProviderModel):
    """Air quality index block."""

    aqi: int = Field(..., ge=1, le=5, description="Air Quality Index (1-5)")


class AirQualityComponents(ProviderModel):
    """Pollutant concentrations in μg/m3."""

    co: float | None = Field(None, description="Carbon monoxide")
    no: float | None = Field(None, description="Nitrogen monoxide")
    no2: float | None = Field(None, description="Nitrogen dioxide")
    o3: float | None = Field(None, description="Ozone")
    so2: float | None = Field(None, description="Sulphur dioxide")
    pm2_5: float | None = Field(None, description="Fine particulate matter")
    pm10: float | None = Field(None, description="Coarse particulate matter")
    nh3: float | None = Field(None, description="Ammonia")


class AirQualityReading(ProviderModel):
    """One air quality reading."""

    main: AirQualityMain
    components: AirQualityComponents | None = None
    dt: int = Field(..., description="Reading time, unix UTC")


class AirQualityResponse(ProviderModel):
    """Air pollution response model."""

    readings: list[AirQualityReading] = Field(
        ..., alias="list", description="Readings, current first"
    )

    @property
    def current_index(self) -> int | None:
        """AQI of the first reading, or None when the list is empty."""
        return self.readings[0].main.aqi if self.readings else None


# ============================================================================
# Error body
# ============================================================================


class ProviderErrorBody(ProviderModel):
    """Error body returned with non-2xx responses, e.g. ``{"cod": "404", ...}``."""

    cod: str | int
    message: str
