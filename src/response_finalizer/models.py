"""Core type definitions for the response finalizer.

This module provides the per-request response context that upstream handlers
fill in and the finalizer completes, together with the closed set of body
variants the finalizer dispatches on.

Examples:
    Filling a context from a handler::

        from response_finalizer.models import ResponseContext

        ctx = ResponseContext()
        ctx.created({"name": "tree.xie"})
        # ctx.status_code == 201

    Classifying a body::

        >>> classify_body("abc")
        <BodyKind.TEXT: 'text'>
        >>> classify_body(None)
        <BodyKind.ABSENT: 'absent'>
"""

from collections.abc import AsyncIterable, Iterator, Mapping
from enum import Enum
from typing import Any

from response_finalizer.utils.headers import HEADER_CONTENT_TYPE, Headers


class BodyKind(str, Enum):
    """Runtime variant of a response body.

    Attributes:
        ABSENT: No body was supplied.
        TEXT: A text string, encoded as UTF-8.
        BYTES: Raw bytes (bytes, bytearray or memoryview), used as-is.
        STREAM: A readable stream written directly by the transport.
        STRUCTURED: Any other value, encoded by the serializer.
    """

    ABSENT = "absent"
    TEXT = "text"
    BYTES = "bytes"
    STREAM = "stream"
    STRUCTURED = "structured"


def is_stream(value: Any) -> bool:
    """Return True if the value is a readable stream.

    File-like objects (anything with a callable ``read``), async iterables and
    iterators such as generators are streams. Containers like lists and dicts
    are iterable but not iterators, so they are not.
    """
    if callable(getattr(value, "read", None)):
        return True
    return isinstance(value, (AsyncIterable, Iterator))


def classify_body(value: Any) -> BodyKind:
    """Resolve the body variant of a value."""
    if value is None:
        return BodyKind.ABSENT
    if isinstance(value, str):
        return BodyKind.TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BodyKind.BYTES
    if is_stream(value):
        return BodyKind.STREAM
    return BodyKind.STRUCTURED


class ResponseContext:
    """Mutable per-request response state.

    The surrounding framework creates one context per inbound request and
    passes it through the handler chain. Handlers set ``body`` (and optionally
    ``status_code`` and headers); the finalizer then fills ``body_buffer``,
    the content type and the final status.

    Attributes:
        body: Response value produced by handlers, of any variant.
        body_buffer: Finalized body bytes. Once set, the response is
            considered finalized.
        status_code: HTTP status code, 0 meaning unset.
        headers: Case-insensitive response headers.
        request: The inbound request, opaque to the finalizer. Available to
            skip predicates.
    """

    def __init__(
        self,
        body: Any = None,
        status_code: int = 0,
        headers: Mapping[str, str] | None = None,
        request: Any = None,
    ) -> None:
        self.body = body
        self.body_buffer: bytes | None = None
        self.status_code = status_code
        self.headers = Headers(headers)
        self.request = request

    @property
    def body_kind(self) -> BodyKind:
        """Variant of the current body."""
        return classify_body(self.body)

    @property
    def is_stream_body(self) -> bool:
        """True when the body is a readable stream."""
        return self.body_kind is BodyKind.STREAM

    def get_header(self, name: str) -> str:
        """Return a header value, or an empty string when unset."""
        return self.headers.get(name, "")

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any existing value."""
        self.headers[name] = value

    @property
    def content_type(self) -> str:
        return self.get_header(HEADER_CONTENT_TYPE)

    def ok(self, body: Any) -> None:
        """Respond with 200 and the given body."""
        self.status_code = 200
        self.body = body

    def created(self, body: Any) -> None:
        """Respond with 201 and the given body."""
        self.status_code = 201
        self.body = body

    def no_content(self) -> None:
        """Respond with 204 and no body."""
        self.status_code = 204
        self.body = None

    def __repr__(self) -> str:
        return (
            f"ResponseContext(status_code={self.status_code}, "
            f"body_kind={self.body_kind.value}, "
            f"finalized={self.body_buffer is not None})"
        )
