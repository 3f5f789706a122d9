"""Structured logging configuration for the response finalizer.

This module provides structured logging using structlog to emit
JSON-formatted logs with contextual information. The finalizer logs one
event per outcome:

- ``response.finalized``: body encoded, with body kind, status and size
- ``response.stream``: stream body left to the transport
- ``response.encoding_failed``: serializer rejected a structured body
- ``response.invalid``: chain finished without status and body

Examples:
    Configure logging::

        from response_finalizer.observability.logging import configure_logging

        configure_logging(level="DEBUG", json_output=True)

    Output (JSON)::

        {
            "event": "response.finalized",
            "body_kind": "structured",
            "status_code": 201,
            "body_bytes": 19,
            "timestamp": "2024-01-01T00:00:00.000000Z",
            "level": "debug"
        }
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structured logging for the application.

    This should be called once at application startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, emit JSON logs; if False, use console format
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    processors: list[object] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        A structlog logger instance
    """
    return structlog.get_logger(name)
