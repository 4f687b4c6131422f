"""Structured logging configuration — structlog + stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and stdlib logging.

    Reads from environment variables:
        HUBSCAN_LOG_LEVEL  — log level (default: INFO)
        HUBSCAN_LOG_FORMAT — console | json (default: console)

    *level* overrides ``HUBSCAN_LOG_LEVEL`` (the CLI uses it for ``-v``).
    Logs go to stderr; stdout is reserved for the scan document.
    """
    log_level = (level or os.environ.get("HUBSCAN_LOG_LEVEL", "INFO")).upper()
    log_format = os.environ.get("HUBSCAN_LOG_FORMAT", "console").lower()

    # Also applied to stdlib records from httpx
    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        # cli.failed carries exc_info; ConsoleRenderer formats it itself
        event_processors = [structlog.processors.format_exc_info]
    else:
        renderer = structlog.dev.ConsoleRenderer()
        event_processors = []

    structlog.configure(
        processors=shared_processors
        + event_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": log_level,
            },
            # Request lines at INFO would interleave with scanner events
            "loggers": {
                "httpx": {"level": "WARNING"},
                "httpcore": {"level": "WARNING"},
            },
        }
    )
