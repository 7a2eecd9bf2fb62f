"""
=============================================================================
HTTP PRIMITIVES
=============================================================================

The values that flow through the middleware pipeline:

    Headers         Ordered, immutable, case-insensitive header list
    HTTPRequest     The incoming request
    Response        Abstract response contract (status, headers,
                    close_connection, write_body)
    HTTPResponse    In-memory response
    HTTPContext     Request + mutable response slot

=============================================================================
"""

from .headers import Headers
from .request import HTTPRequest, make_request
from .response import (
    Response,
    HTTPResponse,
    ResponseBuilder,
    read_body,
    write_response,
    to_bytes,
    format_http_date,
    ok,
    not_found,
    internal_error,
)
from .context import HTTPContext
from .status_codes import HTTPStatus

__all__ = [
    "Headers",
    "HTTPRequest",
    "make_request",

    # Responses
    "Response",
    "HTTPResponse",
    "ResponseBuilder",
    "read_body",
    "write_response",
    "to_bytes",
    "format_http_date",
    "ok",
    "not_found",
    "internal_error",

    "HTTPContext",
    "HTTPStatus",
]
