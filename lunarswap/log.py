"""structlog setup for applications embedding the engine."""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: int | str = logging.INFO, *, json: bool = False) -> None:
    """Configure structlog for engine event output.

    Args:
        level: Minimum level, as a logging constant or name ("DEBUG", "info", ...)
        json: Render events as JSON lines instead of the console renderer
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    renderer = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def short_id(value: bytes) -> str:
    """Short hex prefix of an identifier for log context."""
    return value.hex()[:12]
