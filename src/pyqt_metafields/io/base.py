"""Protocols for backend transports."""

from typing import Protocol, Any


class JsonTransport(Protocol):
    """Protocol for JSON request/response backends.

    ``get_json`` returns None for a 404 when ``allow_missing`` is set.
    """

    def get_json(self, path: str, allow_missing: bool = False) -> Any:
        ...

    def put_json(self, path: str, body: Any) -> Any:
        ...
