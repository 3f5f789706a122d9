"""Observability utilities for the response finalizer.

This package provides monitoring and debugging capabilities:
- Prometheus metrics for finalization outcomes
- Structured logging with contextual information
"""

from response_finalizer.observability.logging import configure_logging, get_logger
from response_finalizer.observability.metrics import (
    record_error,
    record_response,
    record_skip,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "record_response",
    "record_error",
    "record_skip",
]
