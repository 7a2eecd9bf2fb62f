"""
=============================================================================
COMPRESSION MIDDLEWARE
=============================================================================

Compresses responses with an encoding the client says it understands.

=============================================================================
HOW CONTENT NEGOTIATION WORKS
=============================================================================

    Request:
    ┌───────────────────────────────────────────────────────────────┐
    │ GET /api/data HTTP/1.1                                        │
    │ Accept-Encoding: gzip, deflate                                │
    │                  │     │                                      │
    │                  │     └── client can decode DEFLATE          │
    │                  └── client can decode gzip                   │
    └───────────────────────────────────────────────────────────────┘

    Server registered: [deflate, gzip]
                          ▲
                          └── first registered algorithm the client
                              accepts wins: deflate

    Response:
    ┌───────────────────────────────────────────────────────────────┐
    │ HTTP/1.1 200 OK                                               │
    │ Content-Type: application/json                                │
    │ content-length: 1234    (compressed size)                     │
    │ content-encoding: deflate                                     │
    │                                                               │
    │ [deflate compressed body]                                     │
    └───────────────────────────────────────────────────────────────┘

The SERVER's registration order decides ties, not the order of tokens in
the client's header.

=============================================================================
WHAT IS NOT NEGOTIATED
=============================================================================

Quality values are not parsed. A token counts only if it matches an
algorithm name exactly (ignoring case):

    Accept-Encoding: gzip             → gzip accepted
    Accept-Encoding: GZIP             → gzip accepted
    Accept-Encoding: gzip;q=0.5       → NOT accepted ("gzip;q=0.5" != "gzip")
    Accept-Encoding: br               → nothing registered, pass-through
    Accept-Encoding: , ,gzip,,        → gzip accepted (empties ignored)

=============================================================================
ORDERING
=============================================================================

Compression decorates the RESPONSE, so it runs after next() returns:

    1. next()                    routing, handlers, error handlers all run
    2. context.response is None? nothing to compress, stop
    3. already has Content-Encoding? never compress twice, stop
    4. pick algorithm            first match, or stop
    5. context.response = algorithm.compress(context.response)

Step 5 is a single assignment of a fully built response, so no one ever
sees a half-compressed body. If compression fails the exception goes up
the chain: there is no fallback to the uncompressed response.

=============================================================================
"""

from typing import List, Optional, Sequence
import logging

from .base import Middleware, Continuation
from ..compression.algorithms import (
    CompressionAlgorithm,
    DeflateAlgorithm,
    GZipAlgorithm,
    create_algorithm,
)
from ..config import CompressionConfig
from ..http.context import HTTPContext
from ..http.response import Response


logger = logging.getLogger(__name__)


def parse_accept_encoding(header: str) -> List[str]:
    """
    Split an Accept-Encoding header into lowercase tokens.

    Splits on commas, strips whitespace and drops empty entries. Never
    raises; anything unparseable is just a token nobody will match.

        >>> parse_accept_encoding("gzip, deflate")
        ['gzip', 'deflate']
        >>> parse_accept_encoding(" , GZip;q=0.5,")
        ['gzip;q=0.5']
    """
    return [token.strip().lower() for token in header.split(",") if token.strip()]


def is_encoded(response: Response) -> bool:
    """
    Check if a response body already has a content-coding applied.

    "identity" means no coding, so a response labelled with it is still
    eligible for compression (the label is replaced, not kept).
    """
    return any(
        value.strip().lower() not in ("", "identity")
        for value in response.headers.get_all("Content-Encoding")
    )


class CompressionMiddleware(Middleware):
    """
    Negotiating response compression middleware.

    =========================================================================
    USAGE
    =========================================================================

        # Default: deflate preferred over gzip
        pipeline.add(CompressionMiddleware())

        # Prefer gzip, maximum compression
        pipeline.add(CompressionMiddleware(GZipAlgorithm(level=9), DeflateAlgorithm()))

        # From environment / config
        pipeline.add(CompressionMiddleware.from_config(CompressionConfig.from_env()))

    =========================================================================
    MIDDLEWARE POSITION
    =========================================================================

    Add it AFTER middleware that should see the uncompressed response and
    BEFORE the endpoint. Middleware added earlier (outer) sees the
    compressed response on the way out.

    =========================================================================
    """

    def __init__(self, *algorithms: CompressionAlgorithm):
        """
        Initialize compression middleware.

        Args:
            *algorithms: Algorithms in preference order. The first one the
                         client accepts is used. Defaults to deflate, gzip.
        """
        if not algorithms:
            algorithms = (DeflateAlgorithm(), GZipAlgorithm())
        self.algorithms = tuple(algorithms)

    @classmethod
    def from_config(cls, config: CompressionConfig) -> "CompressionMiddleware":
        """Build the middleware from the algorithms and level in a config."""
        config.validate()
        return cls(*(create_algorithm(name, config.level) for name in config.algorithms))

    def handle(self, context: HTTPContext, next: Continuation) -> None:
        """Run the chain, then compress the response if the client allows it."""
        next()

        response = context.response
        if response is None:
            return

        if is_encoded(response):
            logger.debug(
                f"Response for {context.request.path} already encoded "
                f"({response.headers.get('Content-Encoding')}), skipping"
            )
            return

        tokens = parse_accept_encoding(context.request.get_header("Accept-Encoding"))
        algorithm = self.select(tokens)

        if algorithm is None:
            if tokens:
                logger.debug(f"No registered encoding in {tokens} for {context.request.path}")
            return

        compressed = algorithm.compress(response)
        logger.debug(
            f"Compressed {context.request.path} with {algorithm.name}: "
            f"{response.headers.get('Content-Length', '?')} -> "
            f"{len(compressed.body)} bytes"
        )
        context.response = compressed

    def select(self, tokens: Sequence[str]) -> Optional[CompressionAlgorithm]:
        """
        Pick the first registered algorithm matching any client token.

        Registration order is the tie-break, so this is a plain ordered
        scan, never a dict lookup.

        Args:
            tokens: Tokens from parse_accept_encoding()

        Returns:
            The chosen algorithm, or None if nothing matches
        """
        for algorithm in self.algorithms:
            if any(algorithm.matches(token) for token in tokens):
                return algorithm
        return None


class ForcedCompressionMiddleware(Middleware):
    """
    Compresses every response with one fixed algorithm, no negotiation.

    For clients known to decode the encoding (internal services, proxies
    that re-encode). Responses that are already encoded pass through.

        pipeline.add(ForcedCompressionMiddleware())            # deflate
        pipeline.add(ForcedCompressionMiddleware(GZipAlgorithm()))
    """

    def __init__(self, algorithm: Optional[CompressionAlgorithm] = None):
        self.algorithm = algorithm or DeflateAlgorithm()

    def handle(self, context: HTTPContext, next: Continuation) -> None:
        next()

        if context.response is not None and not is_encoded(context.response):
            context.response = self.algorithm.compress(context.response)
