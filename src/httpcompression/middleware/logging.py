"""
=============================================================================
LOGGING MIDDLEWARE
=============================================================================

One access-log line per request, including which content-coding (if any)
was applied to the response.

    Text (Apache-style):
        127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /report" 200 1187 gzip 2.31ms

    JSON:
        {"request_id": "1a2b3c4d", "method": "GET", "path": "/report",
         "status_code": 200, "content_length": "1187",
         "content_encoding": "gzip", "duration_ms": 2.31, ...}

=============================================================================
MIDDLEWARE POSITION
=============================================================================

Logging should be FIRST (outermost) in the pipeline:

    pipeline.add(LoggingMiddleware())       # sees the final response
    pipeline.add(CompressionMiddleware())

Being outermost, it times the whole chain and logs the response as it
will be written to the client, compressed size included.

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from typing import Optional

from .base import Middleware, Continuation
from ..http.context import HTTPContext


logger = logging.getLogger("httpcompression.access")


@dataclass
class RequestLog:
    """Structured log entry for a request."""

    request_id: str
    method: str
    path: str
    client_ip: str
    status_code: int
    content_length: str
    content_encoding: str
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.content_encoding} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

        pipeline.add(LoggingMiddleware(log_format="json"))
        pipeline.add(LoggingMiddleware(skip_paths=["/health"]))
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        """
        Initialize logging middleware.

        Args:
            log_format: "text" (human readable) or "json" (machine parseable)
            log_level: Logging level for access lines
            skip_paths: Paths not to log (health checks are noisy)
        """
        self.log_format = log_format
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def handle(self, context: HTTPContext, next: Continuation) -> None:
        request = context.request

        # Short random ID to correlate the access line with error logs
        request_id = str(uuid.uuid4())[:8]
        context.state["request_id"] = request_id

        start_time = time.time()

        try:
            next()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        if request.path in self.skip_paths:
            return

        response = context.response
        if response is None:
            # Raw connection takeover: nothing was produced to log
            status_code, content_length, content_encoding = 0, "-", "-"
        else:
            status_code = int(response.status)
            content_length = response.headers.get("Content-Length", "-")
            content_encoding = response.headers.get("Content-Encoding", "identity")

        log_entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0],
            status_code=status_code,
            content_length=content_length,
            content_encoding=content_encoding,
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())
