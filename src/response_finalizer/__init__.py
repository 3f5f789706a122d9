"""
Response finalization stage for Python web applications.

This package turns the response value produced by upstream handlers into
bytes, a content type and a status code, leaving already finalized responses
untouched.
"""

__version__ = "0.1.0"

from response_finalizer.config import FinalizerConfig
from response_finalizer.core.finalizer import ResponseFinalizer, finalize
from response_finalizer.exceptions import (
    ERROR_CATEGORY,
    EncodingError,
    HTTPError,
    InvalidResponseError,
)
from response_finalizer.models import BodyKind, ResponseContext, classify_body

__all__ = [
    "__version__",
    "ERROR_CATEGORY",
    "BodyKind",
    "EncodingError",
    "FinalizerConfig",
    "HTTPError",
    "InvalidResponseError",
    "ResponseContext",
    "ResponseFinalizer",
    "classify_body",
    "finalize",
]
