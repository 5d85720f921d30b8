"""Settings for the weather client, forecast shaping and logging.

Values come from environment variables (or a .env file) and are validated
by pydantic-settings. Field names map to upper-case variables, e.g.
OPENWEATHER_API_KEY or FORECAST_CADENCE_HOURS.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.shared.constants import (
    API_TIMEOUT_SECONDS,
    DAILY_FORECAST_DAYS,
    HOURLY_WINDOW_HOURS,
    ONE_HOUR_CADENCE,
    OPENWEATHER_BASE_URL,
    THREE_HOUR_CADENCE,
)


class Settings(BaseSettings):
    """Weather 360 settings.

    The API key is optional at load time so that offline tooling and tests
    can build settings; requests without one are rejected by the provider.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    # OpenWeatherMap API
    openweather_api_key: str | None = Field(
        default=None,
        description="OpenWeatherMap API key (appid)",
    )
    openweather_base_url: str = Field(
        default=OPENWEATHER_BASE_URL,
        description="OpenWeatherMap data API base URL",
    )
    openweather_units: Literal["standard", "metric", "imperial"] = Field(
        default="metric",
        description="Unit system requested from the provider",
    )
    request_timeout_seconds: float = Field(
        default=API_TIMEOUT_SECONDS,
        gt=0,
        le=120,
        description="HTTP request timeout in seconds",
    )

    # Forecast shaping
    forecast_cadence_hours: int = Field(
        default=THREE_HOUR_CADENCE,
        description="Sample cadence of the forecast provider (3 = 5-day/3-hour, 1 = hourly)",
    )
    daily_forecast_days: int = Field(
        default=DAILY_FORECAST_DAYS,
        ge=1,
        le=DAILY_FORECAST_DAYS,
        description="Number of daily forecast entries to keep",
    )

    # Presentation flags owned by the caller
    default_city: str = Field(
        default="London",
        description="City used when no location is given",
    )
    use_fahrenheit: bool = Field(
        default=False,
        description="Render temperatures in Fahrenheit",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )

    @field_validator("openweather_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the API base URL uses an http(s) scheme."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("OpenWeatherMap base URL must use http:// or https:// scheme")
        return v.rstrip("/")

    @field_validator("forecast_cadence_hours")
    @classmethod
    def validate_cadence(cls, v: int) -> int:
        """Only the hourly and 3-hourly providers are supported."""
        if v not in (ONE_HOUR_CADENCE, THREE_HOUR_CADENCE):
            raise ValueError("Forecast cadence must be 1 or 3 hours")
        return v

    @property
    def hourly_sample_count(self) -> int:
        """Number of forecast samples covering the next 24 hours."""
        return HOURLY_WINDOW_HOURS // self.forecast_cadence_hours


# Global settings instance - lazy loaded
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
