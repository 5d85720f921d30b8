"""Fetch and print the weather for a city or coordinates.

This script runs one fetch cycle through WeatherService and prints the
headline card, the hourly strip and the daily list to stdout.

Usage:
    python -m scripts.fetch_weather London
    python -m scripts.fetch_weather --lat 51.51 --lon -0.13 --fahrenheit
"""

import argparse
import sys
from datetime import datetime, timezone

from src.forecast.service import FetchState, WeatherService
from src.forecast.units import to_display_temperature
from src.shared.config.logging import configure_logging, get_logger
from src.shared.config.settings import get_settings

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Fetch current weather and forecasts")
    parser.add_argument("city", nargs="?", help="City name, e.g. 'London' or 'London,GB'")
    parser.add_argument("--lat", type=float, help="Latitude (use with --lon)")
    parser.add_argument("--lon", type=float, help="Longitude (use with --lat)")
    parser.add_argument(
        "--fahrenheit",
        action="store_true",
        default=None,
        help="Render temperatures in Fahrenheit",
    )
    args = parser.parse_args(argv)

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")
    if args.city and args.lat is not None:
        parser.error("Pass either a city or --lat/--lon, not both")
    return args


def _temp(celsius: float, fahrenheit: bool) -> str:
    unit = "F" if fahrenheit else "C"
    return f"{to_display_temperature(celsius, fahrenheit):.0f}°{unit}"


def render(state: FetchState, fahrenheit: bool, now: datetime) -> str:
    """Render a successful FetchState as plain text.

    Args:
        state: Final state of a fetch
        fahrenheit: Render temperatures in Fahrenheit
        now: Current instant, used for the "Now" label

    Returns:
        Multi-line text block
    """
    display = state.display
    if display is None:
        return f"Error: {state.error_message}"

    lines = [
        f"{display.city_name}: {_temp(display.temperature, fahrenheit)} {display.description}",
        f"  Feels like {_temp(display.feels_like, fahrenheit)}"
        f"  H {_temp(display.high_temp, fahrenheit)}  L {_temp(display.low_temp, fahrenheit)}",
        f"  Humidity {display.humidity_pct}%"
        f"  Wind {display.wind_speed:.1f} m/s {display.wind_direction_label}"
        f"  Air quality {display.air_quality_label}",
    ]
    if not display.sunrise_unknown and not display.sunset_unknown:
        lines.append(
            f"  Sunrise {display.local_sunrise:%H:%M}  Sunset {display.local_sunset:%H:%M}"
        )

    if state.hourly:
        lines.append("")
        lines.append("Hourly:")
        for entry in state.hourly:
            marker = " *" if entry.is_near_sunset else ""
            lines.append(
                f"  {entry.time_label(now):>6}  {_temp(entry.temperature, fahrenheit):>6}"
                f"  {entry.description}{marker}"
            )

    if state.daily:
        lines.append("")
        lines.append("Daily:")
        for day in state.daily:
            lines.append(
                f"  {day.day_label:>6}  {_temp(day.low_temp, fahrenheit):>6}"
                f" / {_temp(day.high_temp, fahrenheit):>6}  {day.description}"
            )

    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging()
    settings = get_settings()
    fahrenheit = settings.use_fahrenheit if args.fahrenheit is None else args.fahrenheit

    service = WeatherService(settings=settings)
    try:
        if args.lat is not None:
            state = service.fetch_weather_by_coordinates(args.lat, args.lon)
        else:
            state = service.fetch_weather(args.city or settings.default_city)
    finally:
        service.client.close()

    print(render(state, fahrenheit, datetime.now(timezone.utc)))
    return 0 if state.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
