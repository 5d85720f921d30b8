"""Structured logging configuration using structlog.

JSON logs by default, coloured console logs when LOG_FORMAT=console. Every
event passes through a redaction step so the OpenWeatherMap key never reaches
a log sink, and events emitted during a fetch carry that fetch's sequence
number and location.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from src.shared.config.settings import get_settings

REDACTED = "***"
SECRET_KEYS = frozenset({"appid", "api_key", "openweather_api_key"})


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask API keys in top-level and nested ``params`` fields."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    params = event_dict.get("params")
    if isinstance(params, dict) and SECRET_KEYS.intersection(params):
        event_dict["params"] = {k: REDACTED if k in SECRET_KEYS else v for k, v in params.items()}
    return event_dict


def add_environment(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the deployment environment."""
    event_dict.setdefault("environment", get_settings().environment)
    return event_dict


@contextmanager
def fetch_context(sequence: int, **location: Any) -> Iterator[None]:
    """Bind a fetch's sequence number and location to every log event inside."""
    bound = {k: v for k, v in location.items() if v is not None}
    with structlog.contextvars.bound_contextvars(fetch_sequence=sequence, **bound):
        yield


def configure_logging() -> None:
    """Configure structured logging for the application.

    Sets up structlog based on settings:
    - json: JSON lines with ISO timestamps
    - console: Coloured, human-readable output
    """
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_environment,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Log lines go to stderr so CLI output on stdout stays clean
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level),
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
