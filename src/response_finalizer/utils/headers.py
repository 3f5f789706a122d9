"""Header storage and lookup utilities for the response finalizer.

This module provides:
- A case-insensitive, insertion-ordered header mapping
- MIME type and header name constants used when finalizing bodies
"""

from collections.abc import Iterable, Iterator, Mapping, MutableMapping

HEADER_CONTENT_TYPE = "Content-Type"

MIME_TEXT_PLAIN = "text/plain; charset=UTF-8"
MIME_BINARY = "application/octet-stream"
MIME_APPLICATION_JSON = "application/json; charset=UTF-8"


class Headers(MutableMapping[str, str]):
    """Case-insensitive, ordered mapping of header names to values.

    Lookups ignore case. Iteration yields names in insertion order, using
    the casing of the most recent write.

    Example:
        >>> headers = Headers({"Content-Type": "text/html"})
        >>> headers["content-type"]
        'text/html'
        >>> headers["CONTENT-TYPE"] = "application/json"
        >>> list(headers.items())
        [('CONTENT-TYPE', 'application/json')]
    """

    def __init__(
        self,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        # lowercase name -> (original name, value)
        self._store: dict[str, tuple[str, str]] = {}
        if headers is not None:
            self.update(headers)

    def __getitem__(self, name: str) -> str:
        return self._store[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        # An existing entry keeps its position but adopts the new casing
        self._store[name.lower()] = (name, value)

    def __delitem__(self, name: str) -> None:
        del self._store[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._store

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self.lower_items() == other.lower_items()
        if isinstance(other, Mapping):
            return self.lower_items() == Headers(other).lower_items()
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def lower_items(self) -> dict[str, str]:
        """Return the headers as a dict keyed by lowercase name."""
        return {key: value for key, (_, value) in self._store.items()}

    def copy(self) -> "Headers":
        """Return a shallow copy preserving order and casing."""
        return Headers(self.items())
