"""Unit conversion helpers.

Temperatures flow through the pipeline in Celsius (metric requests); the
Fahrenheit preference is applied only when rendering.
"""

import math

from src.shared.constants import AIR_QUALITY_LABELS, COMPASS_POINTS

KELVIN_OFFSET = 273.15


def kelvin_to_celsius(kelvin: float) -> float:
    """Convert Kelvin to Celsius."""
    return kelvin - KELVIN_OFFSET


def celsius_to_kelvin(celsius: float) -> float:
    """Convert Celsius to Kelvin."""
    return celsius + KELVIN_OFFSET


def celsius_to_fahrenheit(celsius: float) -> float:
    """Convert Celsius to Fahrenheit.

    Args:
        celsius: Temperature in Celsius

    Returns:
        Temperature in Fahrenheit
    """
    return (celsius * 9.0 / 5.0) + 32.0


def kelvin_to_fahrenheit(kelvin: float) -> float:
    """Convert Kelvin to Fahrenheit."""
    return celsius_to_fahrenheit(kelvin_to_celsius(kelvin))


def to_display_temperature(celsius: float, fahrenheit: bool = False) -> float:
    """Apply the caller's unit preference to a Celsius reading.

    Args:
        celsius: Temperature in Celsius
        fahrenheit: Render in Fahrenheit instead

    Returns:
        Temperature in the preferred unit
    """
    return celsius_to_fahrenheit(celsius) if fahrenheit else celsius


def wind_direction_label(degrees: float) -> str:
    """Map a wind bearing to a 16-point compass label.

    Bearings are normalised into [0, 360) and rounded half away from zero
    to the nearest 22.5° sector, so 11.25° is "NNE" and 348.75° is "N".

    Example:
        >>> wind_direction_label(225)
        'SW'
    """
    normalised = degrees % 360
    index = int(math.floor(normalised / 22.5 + 0.5)) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]


def air_quality_label(index: int) -> str:
    """Human label for an air quality index (1 Good ... 5 Very Poor)."""
    return AIR_QUALITY_LABELS.get(index, "Unknown")
