"""
=============================================================================
HTTP RESPONSES
=============================================================================

The response contract shared by every handler, middleware and the
connection writer, plus the everyday in-memory response and its builder.

=============================================================================
THE RESPONSE CONTRACT
=============================================================================

Anything the connection layer can send implements four things:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  status            HTTPStatus (200, 404, ...)                       │
    │  headers           ordered Headers collection                       │
    │  close_connection  close the socket after sending?                  │
    │  write_body(sink)  write the body bytes into any binary sink        │
    └─────────────────────────────────────────────────────────────────────┘

write_body() is the important one. The writer normally passes the socket
file, but any object with a write(bytes) method works. That is what lets
compression redirect a response's body into a gzip stream without the
response knowing about it:

    original.write_body(socket_file)      # normal delivery
    original.write_body(gzip_stream)      # same call, different sink

=============================================================================
IMMUTABILITY
=============================================================================

Responses are frozen. Middleware that wants to change a response builds a
new one and puts it in the context's response slot. Nothing downstream can
ever observe a response halfway through being rewritten.

=============================================================================
SERIALIZATION FORMAT
=============================================================================

    HTTP/1.1 200 OK\\r\\n             ← Status line
    Content-Type: text/plain\\r\\n
    Content-Length: 11\\r\\n           ← Added when missing
    Date: Wed, 01 Jan 2026 ...\\r\\n   ← Added when missing
    Server: PyHTTPServer/1.0\\r\\n     ← Added when missing
    \\r\\n                             ← Empty line (separator)
    hello world                       ← Body bytes

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, BinaryIO, Dict, Optional, Union
import json

from .headers import Headers
from .status_codes import HTTPStatus, reason_phrase


class Response(ABC):
    """
    Abstract HTTP response.

    Subclasses expose status, headers and close_connection as attributes
    or properties and implement write_body().
    """

    status: HTTPStatus
    headers: Headers
    close_connection: bool

    @abstractmethod
    def write_body(self, sink: BinaryIO) -> None:
        """
        Write the response body into a binary sink.

        Args:
            sink: Any object with a write(bytes) method
        """


@dataclass(frozen=True)
class HTTPResponse(Response):
    """
    In-memory HTTP response.

    Use ResponseBuilder for a more convenient way to construct responses.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    close_connection: bool = False
    version: str = "HTTP/1.1"

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 200 OK"
        """
        return format_status_line(self.status, self.version)

    def write_body(self, sink: BinaryIO) -> None:
        sink.write(self.body)


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .json({"message": "Hello"})
            .header("X-Custom", "value")
            .build())

    Each method returns self except build(), which freezes the result
    into an HTTPResponse.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""
        self._close_connection = False

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """
        Add a single response header.

        Args:
            name: Header name (e.g., "X-Request-Id")
            value: Header value

        Returns:
            Self for method chaining
        """
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        """Add multiple headers at once."""
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body (raw bytes or string).

        Strings are encoded as UTF-8.
        """
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        """Set a plain text response body."""
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def json(self, data: Any, pretty: bool = False) -> "ResponseBuilder":
        """
        Set a JSON response body.

        Args:
            data: Any JSON-serializable data
            pretty: If True, format with indentation for readability

        Returns:
            Self for method chaining
        """
        indent = 2 if pretty else None
        self._body = json.dumps(data, indent=indent, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def keep_alive(self, timeout: int = 5, max_requests: int = 100) -> "ResponseBuilder":
        """Set keep-alive connection headers."""
        self._headers["Connection"] = "keep-alive"
        self._headers["Keep-Alive"] = f"timeout={timeout}, max={max_requests}"
        self._close_connection = False
        return self

    def close_connection(self) -> "ResponseBuilder":
        """
        Mark the connection for closing after this response.

        Sets both the Connection: close header and the response's
        close_connection flag the connection layer acts on.
        """
        self._headers["Connection"] = "close"
        self._close_connection = True
        return self

    def build(self) -> HTTPResponse:
        """Build and return the HTTPResponse object."""
        return HTTPResponse(
            status=self._status,
            headers=Headers(self._headers),
            body=self._body,
            close_connection=self._close_connection,
        )


# =============================================================================
# SERIALIZATION
# =============================================================================

def format_status_line(status: int, version: str = "HTTP/1.1") -> str:
    """Format "HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE"."""
    return f"{version} {int(status)} {reason_phrase(status)}"


def read_body(response: Response) -> bytes:
    """Collect a response body into bytes by writing it to a buffer."""
    with BytesIO() as buffer:
        response.write_body(buffer)
        return buffer.getvalue()


def write_response(
    response: Response,
    sink: BinaryIO,
    server_name: str = "PyHTTPServer/1.0",
) -> None:
    """
    Serialize a response onto a binary sink (usually the socket file).

    The response's own headers are written unchanged and in order.
    Content-Length, Date and Server are only added when missing; when
    Content-Length is missing the body is buffered first to measure it.

    Args:
        response: Any Response implementation
        sink: Binary destination with a write(bytes) method
        server_name: Value for the Server header
    """
    headers = response.headers
    body: Optional[bytes] = None

    # Content-Length: client needs it to know where the body ends
    if "Content-Length" not in headers:
        body = read_body(response)
        headers = headers.plus(("Content-Length", str(len(body))))

    if "Date" not in headers:
        headers = headers.plus(("Date", format_http_date(datetime.now(timezone.utc))))

    if "Server" not in headers:
        headers = headers.plus(("Server", server_name))

    lines = [format_status_line(response.status, getattr(response, "version", "HTTP/1.1"))]
    for name, value in headers:
        lines.append(f"{name}: {value}")
    lines.append("")

    sink.write("\r\n".join(lines).encode("utf-8") + b"\r\n")

    if body is None:
        response.write_body(sink)
    else:
        sink.write(body)


def to_bytes(response: Response, server_name: str = "PyHTTPServer/1.0") -> bytes:
    """Serialize a response into a complete HTTP message."""
    with BytesIO() as buffer:
        write_response(response, buffer, server_name)
        return buffer.getvalue()


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: Union[str, bytes, dict, list] = "", content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    - dict/list → JSON response
    - str → text response
    - bytes → raw response
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if isinstance(body, (dict, list)):
        builder.json(body)
    elif isinstance(body, str):
        builder.text(body, content_type or "text/plain; charset=utf-8")
    else:
        builder.body(body)
        if content_type:
            builder.content_type(content_type)

    return builder.build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    """Create a 404 Not Found response."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).json({"error": message}).build()


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    The connection is marked for closing: after an unhandled failure the
    connection state can't be trusted for another request.
    """
    return (ResponseBuilder()
        .status(HTTPStatus.INTERNAL_SERVER_ERROR)
        .json({"error": message})
        .close_connection()
        .build())
