"""Prometheus metrics for the response finalizer.

Metrics include:

- Finalized responses by body kind and status code
- Errors by kind (invalid response, encoding failure)
- Skipped requests
- Finalized body sizes

Examples:
    Recording a finalized response::

        from response_finalizer.observability.metrics import record_response

        record_response(body_kind="text", status_code=200, body_bytes=3)

    Recording an encoding failure::

        record_error("encoding_failure")
"""

from prometheus_client import Counter, Histogram

# Labels: body_kind (text, bytes, structured, stream, absent), status_code
responses_total = Counter(
    "response_finalizer_responses_total",
    "Total number of responses finalized",
    ["body_kind", "status_code"],
)

# Labels: kind (invalid_response, encoding_failure)
errors_total = Counter(
    "response_finalizer_errors_total",
    "Total number of finalization errors",
    ["kind"],
)

skipped_total = Counter(
    "response_finalizer_skipped_total",
    "Total number of requests for which the finalizer was skipped",
)

body_bytes = Histogram(
    "response_finalizer_body_bytes",
    "Size of finalized response bodies in bytes",
    buckets=[0, 64, 256, 1024, 4096, 16384, 65536, 262144, 1048576],
)


def record_response(body_kind: str, status_code: int, body_bytes_count: int | None = None) -> None:
    """Record a finalized response.

    Args:
        body_kind: Variant of the body
        status_code: Final HTTP status code
        body_bytes_count: Size of the body buffer; None when nothing was buffered

    Examples:
        >>> record_response("structured", 201, 19)
        >>> record_response("stream", 200)
    """
    responses_total.labels(body_kind=body_kind, status_code=str(status_code)).inc()
    if body_bytes_count is not None:
        body_bytes.observe(body_bytes_count)


def record_error(kind: str) -> None:
    """Record a finalization error.

    Examples:
        >>> record_error("invalid_response")
    """
    errors_total.labels(kind=kind).inc()


def record_skip() -> None:
    """Record a skipped request."""
    skipped_total.inc()
