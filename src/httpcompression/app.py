"""
=============================================================================
APPLICATION
=============================================================================

Ties a middleware pipeline and an endpoint together and writes the result
to the connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  connection layer                                                   │
    │      │  request                                                     │
    │      ▼                                                              │
    │  Application.handle(request, sink)                                  │
    │      │                                                              │
    │      ├── process(request) ──► pipeline ──► endpoint                 │
    │      │                                                              │
    │      ├── ok:    write context.response, keep connection if allowed  │
    │      └── error: log, write 500 + Connection: close, close           │
    └─────────────────────────────────────────────────────────────────────┘

handle() returns whether the connection may be reused. The connection
layer owns the socket; this module only decides.

=============================================================================
"""

from typing import BinaryIO, Optional
import logging

from .config import CompressionConfig
from .http.context import HTTPContext
from .http.request import HTTPRequest
from .http.response import internal_error, write_response
from .middleware.base import Endpoint, Middleware, MiddlewarePipeline
from .middleware.compression import CompressionMiddleware
from .middleware.logging import LoggingMiddleware


logger = logging.getLogger(__name__)


class Application:
    """
    A pipeline wrapped around an endpoint.

        def report(context):
            context.response = ok(render_report())

        app = Application(report)
        app.use(LoggingMiddleware(), CompressionMiddleware())

        keep_open = app.handle(request, sock_file)
    """

    def __init__(self, endpoint: Endpoint, config: Optional[CompressionConfig] = None):
        self.config = config or CompressionConfig()
        self.config.validate()
        self._endpoint = endpoint
        self._pipeline = MiddlewarePipeline()

    @classmethod
    def from_config(cls, endpoint: Endpoint, config: Optional[CompressionConfig] = None) -> "Application":
        """
        Create an application with the standard middleware stack.

        Logging outermost, negotiated compression closest to the endpoint.
        """
        app = cls(endpoint, config)
        app.use(
            LoggingMiddleware(log_format=app.config.log_format),
            CompressionMiddleware.from_config(app.config),
        )
        return app

    def use(self, *middleware: Middleware) -> "Application":
        """Add middleware in order (first added = outermost)."""
        self._pipeline.use(*middleware)
        return self

    @property
    def pipeline(self) -> MiddlewarePipeline:
        return self._pipeline

    def setup_logging(self) -> None:
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("httpcompression").setLevel(level)

    def process(self, request: HTTPRequest) -> HTTPContext:
        """
        Run a request through the pipeline.

        Exceptions from middleware, the endpoint or compression propagate
        unchanged.

        Returns:
            The context, with context.response set (or None)
        """
        context = HTTPContext(request=request)
        # Wrapped per call so middleware added after construction is used
        self._pipeline.wrap(self._endpoint)(context)
        return context

    def handle(self, request: HTTPRequest, sink: BinaryIO) -> bool:
        """
        Process a request and write the response to the sink.

        Args:
            request: The parsed request
            sink: Binary destination (socket file, buffer)

        Returns:
            True if the connection may be kept open for another request
        """
        try:
            context = self.process(request)
        except Exception as e:
            logger.exception(f"Request failed: {request.method} {request.path}: {e}")
            write_response(internal_error(), sink, self.config.server_name)
            return False

        if context.response is None:
            # A handler took over the connection; nothing left to write
            return False

        write_response(context.response, sink, self.config.server_name)
        return request.is_keep_alive and not context.response.close_connection
