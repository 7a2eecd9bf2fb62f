"""
Unit tests for HTTP responses and the response writer.
"""

import dataclasses
import json
import zlib
from datetime import datetime, timezone

import pytest

from httpcompression.compression import DEFLATE
from httpcompression.http.headers import Headers
from httpcompression.http.response import (
    HTTPResponse,
    ResponseBuilder,
    HTTPStatus,
    format_http_date,
    format_status_line,
    internal_error,
    not_found,
    ok,
    read_body,
    to_bytes,
)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 Not Found"

    def test_headers_from_dict(self):
        """Test that dict headers are converted to Headers."""
        response = HTTPResponse(headers={"X-Custom": "value"})

        assert isinstance(response.headers, Headers)
        assert response.headers.get("x-custom") == "value"

    def test_frozen(self):
        """Test that responses can't be modified."""
        response = HTTPResponse(body=b"a")

        with pytest.raises(dataclasses.FrozenInstanceError):
            response.body = b"b"

    def test_write_body(self):
        """Test that the body is written to any sink."""
        assert read_body(HTTPResponse(body=b"payload")) == b"payload"


class TestWriteResponse:
    """Tests for serializing responses."""

    def test_includes_headers(self):
        """Test that to_bytes includes all headers."""
        response = HTTPResponse(headers={"X-Custom": "value"}, body=b"test")

        result = to_bytes(response)

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"X-Custom: value\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert result.endswith(b"\r\n\r\ntest")

    def test_adds_date_and_server(self):
        """Test that Date and Server are added when missing."""
        result = to_bytes(HTTPResponse(body=b""), server_name="TestServer/2.0")

        assert b"Date: " in result
        assert b"Server: TestServer/2.0\r\n" in result

    def test_existing_content_length_kept(self):
        """Test that an existing Content-Length is not duplicated."""
        response = HTTPResponse(headers={"Content-Length": "11"}, body=b"hello world")

        result = to_bytes(response)

        assert result.lower().count(b"content-length") == 1

    def test_compressed_response_written_unchanged(self, hello_response: HTTPResponse):
        """Test that a compressed response serializes its own headers."""
        compressed = DEFLATE.compress(hello_response)

        result = to_bytes(compressed)
        head, body = result.split(b"\r\n\r\n", 1)

        assert f"content-length: {len(compressed.body)}".encode() in head
        assert b"content-encoding: deflate" in head
        assert head.lower().count(b"content-length") == 1
        assert zlib.decompress(body) == b"hello world"


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_status(self):
        """Test setting status code."""
        assert ResponseBuilder().status(HTTPStatus.CREATED).build().status == HTTPStatus.CREATED

    def test_json_body(self):
        """Test JSON body encoding."""
        data = {"name": "John", "age": 30}
        response = ResponseBuilder().json(data).build()

        assert response.headers.get("Content-Type") == "application/json; charset=utf-8"
        assert json.loads(response.body) == data

    def test_text_body(self):
        """Test plain text body."""
        response = ResponseBuilder().text("Hello, World!").build()

        assert response.headers.get("Content-Type") == "text/plain; charset=utf-8"
        assert response.body == b"Hello, World!"

    def test_keep_alive(self):
        """Test keep-alive headers."""
        response = ResponseBuilder().keep_alive(timeout=10, max_requests=50).build()

        assert response.headers.get("Connection") == "keep-alive"
        assert "timeout=10" in response.headers.get("Keep-Alive")
        assert response.close_connection is False

    def test_close_connection(self):
        """Test that close_connection sets header and flag."""
        response = ResponseBuilder().close_connection().build()

        assert response.headers.get("Connection") == "close"
        assert response.close_connection is True

    def test_method_chaining(self):
        """Test fluent API chaining."""
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("X-Custom", "value")
            .headers({"X-Other": "other"})
            .body("raw")
            .build())

        assert response.headers.get("X-Custom") == "value"
        assert response.headers.get("X-Other") == "other"
        assert response.body == b"raw"


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_ok(self):
        """Test ok() with different body types."""
        assert ok("Hello").body == b"Hello"
        assert b'"msg"' in ok({"msg": "hello"}).body
        assert ok(b"\x00\x01", content_type="application/octet-stream").headers.get(
            "content-type") == "application/octet-stream"

    def test_not_found(self):
        """Test not_found() function."""
        response = not_found("Resource not found")

        assert response.status == HTTPStatus.NOT_FOUND
        assert b"Resource not found" in response.body

    def test_internal_error_closes(self):
        """Test internal_error() marks the connection for closing."""
        response = internal_error()

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert response.close_connection is True


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_phrases(self):
        """Test reason phrases."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.NOT_ACCEPTABLE.phrase == "Not Acceptable"

    def test_status_line_for_any_code(self):
        """Test status lines for registered and unregistered codes."""
        assert format_status_line(401) == "HTTP/1.1 401 Unauthorized"
        assert format_status_line(HTTPStatus.TOO_MANY_REQUESTS, "HTTP/1.0") == "HTTP/1.0 429 Too Many Requests"
        assert format_status_line(299) == "HTTP/1.1 299 Unknown"

    def test_categories(self):
        """Test status category helpers."""
        assert HTTPStatus.OK.is_success
        assert HTTPStatus.NOT_FOUND.is_error
        assert not HTTPStatus.OK.is_error


class TestFormatHTTPDate:
    """Tests for HTTP date formatting."""

    def test_format(self):
        """Test HTTP date format."""
        dt = datetime(2026, 1, 15, 12, 30, 45, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Thu, 15 Jan 2026 12:30:45 GMT"
