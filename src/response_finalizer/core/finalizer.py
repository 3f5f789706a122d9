"""Framework-agnostic response finalizer.

The finalizer sits at the end of a middleware chain. After the downstream
handlers have run it turns the response value they produced into bytes,
assigns a content type and commits a status code:

1. Skip entirely when the configured predicate says so
2. Run the downstream chain, letting its exceptions propagate
3. Leave already finalized contexts (``body_buffer`` set) untouched
4. Reject contexts with neither status nor body
5. Leave stream bodies to the transport
6. Encode text, bytes or structured bodies and set the content type
   when none is set
7. Default the status to 200

A body that cannot be encoded (a structured value the serializer rejects, or
text that is not valid UTF-8) does not fail the request: the failure becomes
a 500 response whose body is the rendered error.

Examples:
    Using the finalizer directly::

        from response_finalizer.core.finalizer import ResponseFinalizer
        from response_finalizer.models import ResponseContext

        finalizer = ResponseFinalizer()
        ctx = ResponseContext()

        async def call_next():
            ctx.created({"name": "tree.xie"})

        await finalizer(ctx, call_next)
        # ctx.body_buffer == b'{"name":"tree.xie"}'
        # ctx.status_code == 201
"""

import inspect
from collections.abc import Callable
from typing import Any

from response_finalizer.config import FinalizerConfig
from response_finalizer.exceptions import EncodingError, InvalidResponseError
from response_finalizer.models import BodyKind, ResponseContext
from response_finalizer.observability.logging import get_logger
from response_finalizer.observability.metrics import record_error, record_response, record_skip
from response_finalizer.utils.headers import HEADER_CONTENT_TYPE, MIME_BINARY, MIME_TEXT_PLAIN

logger = get_logger(__name__)

# Runs the rest of the chain; may return an awaitable
CallNext = Callable[[], Any]


async def _run(call_next: CallNext) -> Any:
    result = call_next()
    if inspect.isawaitable(result):
        result = await result
    return result


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    raise TypeError(f"serializer returned {type(data).__name__}, expected bytes")


class ResponseFinalizer:
    """Converts a context's response value into wire-ready bytes.

    The finalizer holds no per-request state: one instance can serve any
    number of concurrent requests, each with its own ``ResponseContext``.

    Attributes:
        config: Configuration object
        serializer: Function used to encode structured bodies
    """

    def __init__(self, config: FinalizerConfig | None = None) -> None:
        """Initialize the finalizer.

        Args:
            config: Configuration object (uses defaults if not provided)
        """
        self.config = config or FinalizerConfig()
        self.serializer = self.config.resolve_serializer()

    async def __call__(self, ctx: ResponseContext, call_next: CallNext) -> None:
        await self.finalize(ctx, call_next)

    async def finalize(self, ctx: ResponseContext, call_next: CallNext) -> None:
        """Run the downstream chain, then finalize the response.

        Args:
            ctx: The response context, mutated in place
            call_next: Zero-argument callable running the rest of the chain.
                It may return an awaitable.

        Raises:
            InvalidResponseError: If the chain set neither a status nor a body
            Exception: Anything raised by ``call_next``, unchanged
        """
        if self.config.should_skip(ctx):
            record_skip()
            await _run(call_next)
            return

        await _run(call_next)

        if ctx.body_buffer is not None:
            return

        kind = ctx.body_kind
        if ctx.status_code == 0 and kind is BodyKind.ABSENT:
            invalid = InvalidResponseError()
            record_error("invalid_response")
            logger.error("response.invalid", category=invalid.category)
            raise invalid

        if kind is BodyKind.STREAM:
            record_response(kind.value, ctx.status_code or 200)
            logger.debug("response.stream", status_code=ctx.status_code)
            return

        # An empty Content-Type counts as unset
        had_content_type = bool(ctx.get_header(HEADER_CONTENT_TYPE))
        status_code = ctx.status_code or 200
        body: bytes | None = None
        content_type: str | None = None
        failure: Exception | None = None

        # Bytes are computed before any header is touched
        if kind is BodyKind.TEXT:
            try:
                body = ctx.body.encode("utf-8")
                content_type = MIME_TEXT_PLAIN
            except UnicodeEncodeError as e:
                failure = e
        elif kind is BodyKind.BYTES:
            body = bytes(ctx.body)
            content_type = MIME_BINARY
        elif kind is BodyKind.STRUCTURED:
            try:
                body = _as_bytes(self.serializer(ctx.body))
                content_type = self.config.content_type
            except Exception as e:
                failure = e

        if failure is not None:
            error = EncodingError.from_exception(failure)
            body, content_type = error.render(self.config.error_format)
            status_code = error.status_code
            record_error("encoding_failure")
            logger.warning(
                "response.encoding_failed",
                error=error.message,
                value_type=type(ctx.body).__name__,
            )

        if content_type is not None and not had_content_type:
            ctx.set_header(HEADER_CONTENT_TYPE, content_type)

        # Any supplied body is buffered, even an empty one
        if body is not None:
            ctx.body_buffer = body
        ctx.status_code = status_code

        record_response(kind.value, status_code, None if body is None else len(body))
        logger.debug(
            "response.finalized",
            body_kind=kind.value,
            status_code=status_code,
            body_bytes=None if body is None else len(body),
        )


async def finalize(
    ctx: ResponseContext,
    call_next: CallNext,
    config: FinalizerConfig | None = None,
) -> None:
    """Finalize a single response with the given configuration.

    Prefer a long-lived ``ResponseFinalizer`` when finalizing many requests.
    """
    await ResponseFinalizer(config).finalize(ctx, call_next)
