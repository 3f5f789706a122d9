"""Framework adapters for the response finalizer.

- asgi.py: Starlette/FastAPI endpoints running handlers through the finalizer
"""

from response_finalizer.adapters.asgi import (
    finalizer_endpoint,
    render_error,
    responder,
    to_response,
)

__all__ = ["finalizer_endpoint", "render_error", "responder", "to_response"]
