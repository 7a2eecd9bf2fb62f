"""
=============================================================================
MIDDLEWARE FRAMEWORK
=============================================================================

Middleware runs around the endpoint that produces a response:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Incoming Request                                                  │
    │        │                                                            │
    │        ▼                                                            │
    │   LoggingMiddleware      ──► times the request, logs the result     │
    │        ▼                                                            │
    │   CompressionMiddleware  ──► compresses the response on the way out │
    │        ▼                                                            │
    │   Endpoint               ──► sets context.response                  │
    └─────────────────────────────────────────────────────────────────────┘

AVAILABLE MIDDLEWARE

CompressionMiddleware:
    Negotiates a content-coding from Accept-Encoding and compresses the
    response with the first registered algorithm the client accepts.

ForcedCompressionMiddleware:
    Compresses every response with one fixed algorithm.

LoggingMiddleware:
    Access log with timing, status, size and content-coding.

=============================================================================
"""

from .base import (
    Middleware,
    MiddlewarePipeline,
    FunctionMiddleware,
    function_middleware,
    Continuation,
    Endpoint,
)
from .logging import LoggingMiddleware
from .compression import (
    CompressionMiddleware,
    ForcedCompressionMiddleware,
    parse_accept_encoding,
)

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "function_middleware",
    "Continuation",
    "Endpoint",

    # Built-in middleware
    "LoggingMiddleware",
    "CompressionMiddleware",
    "ForcedCompressionMiddleware",
    "parse_accept_encoding",
]
