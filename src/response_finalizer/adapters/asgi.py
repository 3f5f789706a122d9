"""ASGI adapter for FastAPI and Starlette applications.

This module bridges the framework-agnostic finalizer to Starlette endpoints.
A wrapped handler receives the request and a fresh ``ResponseContext``; it
sets the body (and optionally status and headers) and returns nothing. The
adapter then:

1. Runs the handler through the finalizer
2. Converts the finalized context into a Starlette response
3. Renders any raised error through the shared error path: ``HTTPError``
   as-is, anything else wrapped as a 500

Examples:
    Starlette integration::

        from starlette.applications import Starlette
        from starlette.routing import Route
        from response_finalizer.adapters.asgi import responder

        @responder()
        async def get_user(request, ctx):
            ctx.body = {"name": "tree.xie"}

        app = Starlette(routes=[Route("/users/me", get_user)])

    FastAPI integration::

        from fastapi import FastAPI

        app = FastAPI()
        app.add_route("/users/me", get_user, methods=["GET"])
"""

import functools
import inspect
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

from starlette.requests import Request
from starlette.responses import Response, StreamingResponse

from response_finalizer.config import FinalizerConfig
from response_finalizer.core.finalizer import ResponseFinalizer
from response_finalizer.exceptions import ErrorFormat, HTTPError, wrap_error
from response_finalizer.models import ResponseContext
from response_finalizer.observability.logging import get_logger

logger = get_logger(__name__)

# Read size for file-like stream bodies
STREAM_CHUNK_SIZE = 64 * 1024

Handler = Callable[[Request, ResponseContext], Any]
Endpoint = Callable[[Request], Any]


def _iter_file(stream: Any) -> Iterator[Any]:
    while True:
        chunk = stream.read(STREAM_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


def _stream_content(body: Any) -> Iterator[Any] | AsyncIterator[Any]:
    if callable(getattr(body, "read", None)):
        return _iter_file(body)
    return body


def render_error(error: HTTPError, fmt: ErrorFormat = "text") -> Response:
    """Render an HTTP error as a Starlette response.

    Args:
        error: The error to render
        fmt: "text" or "json"

    Returns:
        Response with the error's status code and rendered body
    """
    body, content_type = error.render(fmt)
    return Response(content=body, status_code=error.status_code, media_type=content_type)


def to_response(ctx: ResponseContext) -> Response:
    """Convert a finalized context into a Starlette response.

    Args:
        ctx: The finalized response context

    Returns:
        A ``StreamingResponse`` for stream bodies, a plain ``Response``
        otherwise
    """
    headers = dict(ctx.headers.items())
    status_code = ctx.status_code or 200

    if ctx.body_buffer is None and ctx.is_stream_body:
        return StreamingResponse(
            _stream_content(ctx.body),
            status_code=status_code,
            headers=headers,
        )

    return Response(
        content=ctx.body_buffer or b"",
        status_code=status_code,
        headers=headers,
    )


def finalizer_endpoint(
    handler: Handler,
    finalizer: ResponseFinalizer | None = None,
    config: FinalizerConfig | None = None,
) -> Endpoint:
    """Wrap a context handler as a Starlette endpoint.

    Args:
        handler: Function ``(request, ctx)`` filling the context, sync or async
        finalizer: Finalizer to use (built from ``config`` if not provided)
        config: Configuration for a new finalizer

    Returns:
        An ``async (request) -> Response`` endpoint
    """
    active = finalizer or ResponseFinalizer(config)

    @functools.wraps(handler)
    async def endpoint(request: Request) -> Response:
        ctx = ResponseContext(request=request)

        async def call_next() -> None:
            result = handler(request, ctx)
            if inspect.isawaitable(result):
                await result

        try:
            await active(ctx, call_next)
        except HTTPError as e:
            logger.info(
                "response.error_rendered",
                path=request.url.path,
                status_code=e.status_code,
                category=e.category,
            )
            return render_error(e, active.config.error_format)
        except Exception as e:
            error = wrap_error(e)
            logger.exception(
                "response.unexpected_error",
                path=request.url.path,
                error_type=type(e).__name__,
            )
            return render_error(error, active.config.error_format)

        return to_response(ctx)

    return endpoint


def responder(
    finalizer: ResponseFinalizer | None = None,
    config: FinalizerConfig | None = None,
) -> Callable[[Handler], Endpoint]:
    """Decorator form of ``finalizer_endpoint``.

    Examples:
        >>> @responder(config=FinalizerConfig(fastest=True))
        ... async def hello(request, ctx):
        ...     ctx.body = "hello"
    """

    def decorator(handler: Handler) -> Endpoint:
        return finalizer_endpoint(handler, finalizer=finalizer, config=config)

    return decorator
