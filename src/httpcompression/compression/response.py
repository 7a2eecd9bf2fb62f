"""
=============================================================================
COMPRESSED RESPONSE
=============================================================================

A response that is "some other response, compressed".

=============================================================================
WHAT CHANGES, WHAT DOESN'T
=============================================================================

    ┌──────────────────────────┬─────────────────────────────────────────┐
    │  Original                │  CompressedResponse                     │
    ├──────────────────────────┼─────────────────────────────────────────┤
    │  status 200              │  status 200              (copied)       │
    │  close_connection False  │  close_connection False  (copied)       │
    │  Content-Type: text/html │  Content-Type: text/html (copied)       │
    │  Content-Length: 5120    │  (dropped)                              │
    │                          │  content-length: 1187    (appended)     │
    │                          │  content-encoding: gzip  (appended)     │
    │  body: 5120 bytes        │  body: 1187 compressed bytes            │
    └──────────────────────────┴─────────────────────────────────────────┘

The connection writer can't tell the difference: it calls write_body()
and gets bytes, exactly as with any other response.

=============================================================================
BUILDING THE BODY
=============================================================================

    sink = BytesIO()                    1. fresh in-memory sink
    stream = algorithm.open_stream(sink)   2. compressor wraps the sink
    original.write_body(stream)         3. original writes THROUGH it
    stream.flush(); stream.close()      4. close writes the trailer
    body = sink.getvalue()              5. only now is the length final

Step 4 must come before step 5. gzip writes its CRC32 and size trailer
only on close, and zlib holds back buffered output until the stream is
finished. Reading the sink early gives a truncated body and a wrong
Content-Length.

The whole body is compressed when the response is created, not when it
is written. By the time the response sits in the context, its length is
known and its bytes never change.

=============================================================================
"""

from dataclasses import dataclass, field
from io import BytesIO
from typing import TYPE_CHECKING, BinaryIO, Optional
import zlib

from ..http.headers import Headers
from ..http.response import Response
from ..http.status_codes import HTTPStatus

if TYPE_CHECKING:
    from .algorithms import CompressionAlgorithm


class CompressionError(Exception):
    """Raised when a response body can't be compressed."""

    def __init__(self, encoding: str, message: str):
        super().__init__(f"{encoding} compression failed: {message}")
        self.encoding = encoding


@dataclass(frozen=True)
class CompressedResponse(Response):
    """
    Immutable response holding an eagerly compressed body.

    Use CompressedResponse.create() (or algorithm.compress()) rather than
    the constructor; create() does the compression and header rewrite.
    """

    status: HTTPStatus
    headers: Headers
    body: bytes
    close_connection: bool
    encoding: str
    version: str = "HTTP/1.1"
    original: Optional[Response] = field(default=None, repr=False, compare=False)

    @classmethod
    def create(cls, original: Response, algorithm: "CompressionAlgorithm") -> "CompressedResponse":
        """
        Compress a response with the given algorithm.

        Args:
            original: The response produced by downstream handlers
            algorithm: The algorithm to run the body through

        Returns:
            New CompressedResponse; the original is left untouched

        Raises:
            CompressionError: The compression stream failed
        """
        try:
            with BytesIO() as sink:
                with algorithm.open_stream(sink) as stream:
                    original.write_body(stream)
                    stream.flush()
                # Stream is closed here, so the trailer is in the sink
                body = sink.getvalue()
        except (OSError, zlib.error) as e:
            raise CompressionError(algorithm.name, str(e)) from e

        return cls(
            status=original.status,
            headers=compressed_headers(original.headers, len(body), algorithm.name),
            body=body,
            close_connection=original.close_connection,
            encoding=algorithm.name,
            version=getattr(original, "version", "HTTP/1.1"),
            original=original,
        )

    def write_body(self, sink: BinaryIO) -> None:
        sink.write(self.body)


def compressed_headers(headers: Headers, length: int, encoding: str) -> Headers:
    """
    Rewrite a header list for a compressed body.

    Any existing content-length (and stale content-encoding) entries are
    filtered out, then the new pair is appended. Other headers keep their
    order, duplicates included.
    """
    return headers.without("content-length", "content-encoding").plus(
        ("content-length", str(length)),
        ("content-encoding", encoding),
    )
