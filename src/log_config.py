"""Structlog setup shared by the library modules."""

from typing import Literal, get_args
import logging

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)


def resolve_log_level(value: str | None, default: LogLevel = "WARNING") -> LogLevel:
    """Normalize a level name from the environment, falling back to `default` if it is unknown."""
    level = (value or "").strip().upper()
    return level if level in LOG_LEVELS else default


def configure_logging(level: LogLevel = "INFO", json: bool = False) -> None:
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")

    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "family_tree"):
    return structlog.get_logger(name)
