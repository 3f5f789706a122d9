"""Utility modules for the response finalizer."""

from .headers import (
    HEADER_CONTENT_TYPE,
    MIME_APPLICATION_JSON,
    MIME_BINARY,
    MIME_TEXT_PLAIN,
    Headers,
)

__all__ = [
    "Headers",
    "HEADER_CONTENT_TYPE",
    "MIME_TEXT_PLAIN",
    "MIME_BINARY",
    "MIME_APPLICATION_JSON",
]
