"""Decoder for raw OpenWeatherMap payloads.

Turns raw JSON (bytes, str or an already-parsed dict) into the typed
response models, and forecast items into ForecastSample values.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from src.forecast.models import ForecastSample
from src.shared.api.errors import DecodeError
from src.shared.api.response_models import (
    AirQualityResponse,
    CurrentWeather,
    ForecastItem,
    ForecastResponse,
    ProviderErrorBody,
)
from src.shared.config.logging import get_logger

logger = get_logger(__name__)

TypedRecord = CurrentWeather | ForecastResponse | AirQualityResponse


class PayloadKind(Enum):
    """Provider endpoints the decoder understands."""

    CURRENT = "current"
    FORECAST = "forecast"
    AIR_QUALITY = "air_quality"


MODELS_BY_KIND: dict[PayloadKind, type[BaseModel]] = {
    PayloadKind.CURRENT: CurrentWeather,
    PayloadKind.FORECAST: ForecastResponse,
    PayloadKind.AIR_QUALITY: AirQualityResponse,
}


def _load_json(payload: Any, kind: PayloadKind) -> dict[str, Any]:
    # Parsed bodies may be any JSON value, not only objects
    data = payload
    if isinstance(payload, (bytes, bytearray, str)):
        try:
            data = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(
                kind.value,
                errors=[{"type": "json_invalid", "msg": str(e)}],
                message=f"Malformed {kind.value} payload: {e}",
            ) from e
    if not isinstance(data, dict):
        raise DecodeError(
            kind.value,
            errors=[{"type": "object_type", "msg": f"expected object, got {type(data).__name__}"}],
        )
    return data


def decode(payload: Any, kind: PayloadKind) -> TypedRecord:
    """Decode a provider payload into its typed record.

    Args:
        payload: Raw JSON bytes/str, or an already-parsed JSON value
        kind: Which endpoint produced the payload

    Returns:
        CurrentWeather, ForecastResponse or AirQualityResponse

    Raises:
        DecodeError: If the JSON is malformed or required fields are missing

    Example:
        >>> record = decode(b'{"list": [{"main": {"aqi": 2}, "dt": 0}]}', PayloadKind.AIR_QUALITY)
        >>> record.current_index
        2
    """
    data = _load_json(payload, kind)
    model = MODELS_BY_KIND[kind]

    try:
        record = model.model_validate(data)
    except ValidationError as e:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "type": err["type"], "msg": err["msg"]}
            for err in e.errors()
        ]
        raise DecodeError(kind.value, errors=errors) from e

    logger.debug("payload_decoded", kind=kind.value)
    return record  # type: ignore[return-value]


def decode_error_message(payload: Any) -> str | None:
    """Extract the provider's error message from an error body.

    Args:
        payload: Raw response body

    Returns:
        The ``message`` field of a ``{"cod": ..., "message": ...}`` body,
        or None if the payload is not an error body
    """
    data = payload
    try:
        if isinstance(payload, (bytes, bytearray, str)):
            data = json.loads(payload)
        return ProviderErrorBody.model_validate(data).message
    except (ValueError, UnicodeDecodeError, ValidationError):
        return None


def sample_from_item(item: ForecastItem) -> ForecastSample:
    """Map one forecast item to a ForecastSample.

    The first ``weather[]`` entry supplies the condition; an empty array
    yields empty strings.
    """
    condition = item.weather[0] if item.weather else None
    return ForecastSample(
        epoch_seconds=item.dt,
        temperature=item.main.temp,
        temperature_min=item.main.temp_min,
        temperature_max=item.main.temp_max,
        condition_code=condition.main if condition else "",
        condition_description=condition.description if condition else "",
        icon_id=condition.icon if condition else "",
    )


def samples_from_forecast(response: ForecastResponse) -> list[ForecastSample]:
    """Map every forecast item to a ForecastSample, preserving order."""
    return [sample_from_item(item) for item in response.items]
