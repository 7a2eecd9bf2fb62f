"""
Content-coding algorithms and the compressed response they produce.
"""

from .response import CompressedResponse, CompressionError, compressed_headers
from .algorithms import (
    CompressionAlgorithm,
    DeflateAlgorithm,
    DeflateStream,
    GZipAlgorithm,
    DEFLATE,
    GZIP,
    DEFAULT_LEVEL,
    register_algorithm,
    create_algorithm,
    available_algorithms,
)

__all__ = [
    "CompressedResponse",
    "CompressionError",
    "compressed_headers",

    # Algorithms
    "CompressionAlgorithm",
    "DeflateAlgorithm",
    "DeflateStream",
    "GZipAlgorithm",
    "DEFLATE",
    "GZIP",
    "DEFAULT_LEVEL",

    # Registry
    "register_algorithm",
    "create_algorithm",
    "available_algorithms",
]
