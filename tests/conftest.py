"""
pytest configuration and fixtures.
"""

from typing import Callable, Optional

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpcompression.http import (
    Headers,
    HTTPContext,
    HTTPResponse,
    HTTPStatus,
    make_request,
)
from httpcompression.http.response import Response


class RecordingResponse(Response):
    """Response whose body is written in several chunks, counting writes."""

    def __init__(self, chunks, status=HTTPStatus.OK, headers=None, close_connection=False):
        self.status = status
        self.headers = Headers(headers)
        self.close_connection = close_connection
        self._chunks = list(chunks)
        self.writes = 0

    def write_body(self, sink):
        self.writes += 1
        for chunk in self._chunks:
            sink.write(chunk)


@pytest.fixture
def hello_response() -> HTTPResponse:
    """The 11-byte text/plain response used across the suite."""
    return HTTPResponse(
        status=HTTPStatus.OK,
        headers=Headers([("content-type", "text/plain"), ("content-length", "11")]),
        body=b"hello world",
    )


@pytest.fixture
def large_body() -> bytes:
    """A repetitive body that compresses well."""
    return b'{"id": 1, "name": "widget", "tags": ["a", "b", "c"]}\n' * 200


@pytest.fixture
def make_context() -> Callable[..., HTTPContext]:
    """Factory for a context with an optional Accept-Encoding header."""
    def factory(accept_encoding: Optional[str] = None, path: str = "/") -> HTTPContext:
        headers = {}
        if accept_encoding is not None:
            headers["Accept-Encoding"] = accept_encoding
        return HTTPContext(request=make_request(path, headers))
    return factory


@pytest.fixture
def responding() -> Callable[[HTTPContext, Optional[Response]], Callable[[], None]]:
    """Build a continuation that installs a fixed response into a context."""
    def factory(context: HTTPContext, response: Optional[Response]):
        def next():
            context.response = response
        return next
    return factory


@pytest.fixture
def chunked_response() -> type:
    """The RecordingResponse class, for tests that build their own."""
    return RecordingResponse
