"""Custom exceptions for the response finalizer.

This module defines the structured HTTP error type used throughout the
package, together with the two failure conditions the finalizer itself can
produce: an invalid response (no status and no body) and a body that the
configured serializer could not encode.

Every ``HTTPError`` knows how to render itself as bytes, either as plain text
(``category=..., message=...``) or as a JSON object, so that a shared error
path can turn any raised error into a final response.

Examples:
    Handling an invalid response::

        from response_finalizer.exceptions import InvalidResponseError

        try:
            await finalizer(ctx, call_next)
        except InvalidResponseError as e:
            body, content_type = e.render("text")
            # body == b"category=response-finalizer, message=invalid response"

    Rendering an error as JSON::

        error = HTTPError("not found", status_code=404, category="users")
        error.to_json()
        # b'{"statusCode":404,"category":"users","message":"not found"}'
"""

import json
from typing import Any, Literal

from response_finalizer.utils.headers import MIME_APPLICATION_JSON, MIME_TEXT_PLAIN

# Category tag carried by errors raised by the finalizer
ERROR_CATEGORY = "response-finalizer"

ErrorFormat = Literal["text", "json"]


class HTTPError(Exception):
    """Base exception for errors that map onto an HTTP response.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code the error should be rendered with.
        category: Tag identifying the component that raised the error.
            Empty when the error is not tied to a component.
        exception: True for unexpected/internal errors, False for expected
            domain errors (validation failures, missing resources, ...).

    Examples:
        Raising an expected domain error::

            raise HTTPError("user not found", status_code=404, category="users")

        Rendering an error::

            >>> HTTPError("boom", category="db").to_text()
            'category=db, message=boom'
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        category: str = "",
        exception: bool = False,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code (default 500).
            category: Component tag (default empty).
            exception: Whether the error is unexpected (default False).
        """
        self.message = message
        self.status_code = status_code
        self.category = category
        self.exception = exception
        super().__init__(message)

    def to_text(self) -> str:
        """Render the error as ``category=<category>, message=<message>``.

        The category part is omitted when the error has no category.
        """
        if self.category:
            return f"category={self.category}, message={self.message}"
        return f"message={self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Render the error as a JSON-compatible dictionary."""
        data: dict[str, Any] = {"statusCode": self.status_code}
        if self.category:
            data["category"] = self.category
        data["message"] = self.message
        if self.exception:
            data["exception"] = True
        return data

    def to_json(self) -> bytes:
        """Render the error as compact JSON bytes."""
        data = json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        # Messages may quote unencodable text
        return data.encode("utf-8", "backslashreplace")

    def render(self, fmt: ErrorFormat = "text") -> tuple[bytes, str]:
        """Render the error body and its content type.

        Args:
            fmt: "text" for the plain-text form, "json" for the object form.

        Returns:
            Tuple of (body bytes, content type).

        Raises:
            ValueError: If the format is unknown.
        """
        if fmt == "text":
            return self.to_text().encode("utf-8", "backslashreplace"), MIME_TEXT_PLAIN
        if fmt == "json":
            return self.to_json(), MIME_APPLICATION_JSON
        raise ValueError(f"Unknown error format: {fmt!r}")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code}, category={self.category!r})"
        )


class InvalidResponseError(HTTPError):
    """The handler chain finished without a status code and without a body.

    This is a programmer error in an upstream handler. The finalizer never
    guesses a response for it; the error is raised to the caller, whose error
    path renders it as a 500 response.

    Examples:
        >>> error = InvalidResponseError()
        >>> error.to_text()
        'category=response-finalizer, message=invalid response'
    """

    def __init__(self, message: str = "invalid response") -> None:
        super().__init__(
            message,
            status_code=500,
            category=ERROR_CATEGORY,
            exception=True,
        )


class EncodingError(HTTPError):
    """A text or structured body could not be encoded.

    Attributes:
        cause: The exception raised while encoding.

    Examples:
        Wrapping a serializer failure::

            try:
                body = serializer(value)
            except Exception as e:
                error = EncodingError.from_exception(e)
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message, status_code=500, exception=True)
        self.cause = cause

    @classmethod
    def from_exception(cls, cause: BaseException) -> "EncodingError":
        """Build an encoding error carrying the serializer's message."""
        return cls(str(cause) or type(cause).__name__, cause=cause)


def wrap_error(err: BaseException, status_code: int = 500) -> HTTPError:
    """Convert an arbitrary exception into an ``HTTPError``.

    ``HTTPError`` instances are returned unchanged.

    Args:
        err: The exception to convert.
        status_code: Status code for non-HTTP errors (default 500).

    Returns:
        An ``HTTPError`` describing ``err``.
    """
    if isinstance(err, HTTPError):
        return err
    return HTTPError(
        str(err) or type(err).__name__,
        status_code=status_code,
        exception=status_code >= 500,
    )
