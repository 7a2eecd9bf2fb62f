"""
=============================================================================
HTTPCOMPRESSION - NEGOTIATED RESPONSE COMPRESSION MIDDLEWARE
=============================================================================

Transparent response compression for a middleware-based HTTP pipeline.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   request ──► [ Logging ] ──► [ Compression ] ──► [ Endpoint ]      │
    │                                                        │            │
    │   client  ◄── [ Logging ] ◄── [ Compression ] ◄────────┘            │
    │                                  │                                  │
    │                                  ├─ read Accept-Encoding            │
    │                                  ├─ pick first registered match     │
    │                                  └─ swap in a CompressedResponse    │
    └─────────────────────────────────────────────────────────────────────┘

QUICK START

    from httpcompression import Application, ok

    def hello(context):
        context.response = ok("hello world")

    app = Application.from_config(hello)
    keep_open = app.handle(request, sock_file)

PACKAGE LAYOUT

    http/          Headers, HTTPRequest, Response, HTTPContext, writer
    compression/   CompressionAlgorithm (deflate, gzip), CompressedResponse
    middleware/    Pipeline, CompressionMiddleware, LoggingMiddleware
    config.py      CompressionConfig (dataclass + environment variables)
    app.py         Application (pipeline + endpoint + error boundary)

=============================================================================
"""

__version__ = "1.0.0"

from .config import CompressionConfig
from .app import Application
from .http import (
    Headers,
    HTTPContext,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    Response,
    ResponseBuilder,
    make_request,
    ok,
)
from .compression import (
    CompressedResponse,
    CompressionAlgorithm,
    CompressionError,
    DeflateAlgorithm,
    GZipAlgorithm,
    register_algorithm,
)
from .middleware import (
    CompressionMiddleware,
    ForcedCompressionMiddleware,
    LoggingMiddleware,
    Middleware,
    MiddlewarePipeline,
)

__all__ = [
    "__version__",
    "Application",
    "CompressionConfig",

    # HTTP
    "Headers",
    "HTTPContext",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "Response",
    "ResponseBuilder",
    "make_request",
    "ok",

    # Compression
    "CompressedResponse",
    "CompressionAlgorithm",
    "CompressionError",
    "DeflateAlgorithm",
    "GZipAlgorithm",
    "register_algorithm",

    # Middleware
    "CompressionMiddleware",
    "ForcedCompressionMiddleware",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewarePipeline",
]
