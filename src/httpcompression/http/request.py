"""
=============================================================================
HTTP REQUEST
=============================================================================

The parsed request as seen by the middleware pipeline.

Parsing raw bytes off the socket happens in the connection layer; by the
time a request reaches middleware it is a plain value:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /api/report HTTP/1.1                                           │
    │  Host: localhost:8080                                               │
    │  Accept-Encoding: gzip, deflate        ◄── what compression reads   │
    │  Connection: keep-alive                                             │
    └─────────────────────────────────────────────────────────────────────┘

            │
            ▼

    HTTPRequest(method="GET", path="/api/report", headers=Headers([...]))

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple, Union

from .headers import Headers, HeaderPair


@dataclass(frozen=True)
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    Attributes:
        method:         HTTP method (GET, POST, ...)
        path:           Request path without query string
        version:        HTTP version string
        headers:        Request headers (case-insensitive lookup)
        body:           Raw request body
        client_address: (ip, port) of the client
    """

    method: str = "GET"
    path: str = "/"
    version: str = "HTTP/1.1"
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    client_address: Tuple[str, int] = ("127.0.0.1", 0)

    def __post_init__(self):
        # Accept plain dicts/lists for convenience in handlers and tests
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value by name (case-insensitive).

        Args:
            name: Header name
            default: Value returned when the header is absent

        Returns:
            The raw header value, or default
        """
        return self.headers.get(name, default)

    @property
    def is_keep_alive(self) -> bool:
        """
        Check if the client wants to keep the connection open.

        HTTP/1.1 defaults to keep-alive unless "Connection: close" is sent.
        HTTP/1.0 defaults to close unless "Connection: keep-alive" is sent.
        """
        connection = self.get_header("connection").lower()
        if self.version == "HTTP/1.0":
            return connection == "keep-alive"
        return connection != "close"


def make_request(
    path: str = "/",
    headers: Optional[Union[Mapping[str, str], list[HeaderPair]]] = None,
    method: str = "GET",
) -> HTTPRequest:
    """Shortcut for building a request in handlers, scripts and tests."""
    return HTTPRequest(method=method, path=path, headers=Headers(headers))
