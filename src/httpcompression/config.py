"""
=============================================================================
CONFIGURATION
=============================================================================

Centralized settings for the compression pipeline.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  CONFIGURATION SOURCES (in order of precedence)                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │  1. Constructor arguments     CompressionConfig(level=9)            │
    │  2. Environment variables     HTTP_COMPRESSION_LEVEL=9              │
    │  3. Defaults                  level = 6                             │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass
from typing import Tuple
import os

from .compression.algorithms import available_algorithms


LOG_FORMATS = ("text", "json")


@dataclass
class CompressionConfig:
    """
    Compression and logging configuration.

    Development:
        CompressionConfig(log_level="DEBUG")

    Production:
        CompressionConfig(
            algorithms=("gzip", "deflate"),   # Prefer gzip
            level=5,                          # Cheaper on CPU
            log_format="json",                # For log aggregators
        )
    """

    # ─────────────────────────────────────────────────────────────────────
    # COMPRESSION SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    algorithms: Tuple[str, ...] = ("deflate", "gzip")
    """
    Encoding tokens in preference order.
    When a client accepts several, the first one listed here wins.
    """

    level: int = 6
    """
    Compression level (1-9).
    1 = fastest, 6 = balanced, 9 = smallest output.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'json' or 'text'."""

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "PyHTTPServer/1.0"
    """Server name for the Server header."""

    @classmethod
    def from_env(cls) -> "CompressionConfig":
        """
        Create configuration from environment variables.

        HTTP_COMPRESSION_ALGORITHMS  Comma-separated tokens (default: deflate,gzip)
        HTTP_COMPRESSION_LEVEL       Compression level (default: 6)
        HTTP_LOG_LEVEL               Logging level (default: INFO)
        HTTP_LOG_FORMAT              text or json (default: text)
        HTTP_SERVER_NAME             Server header (default: PyHTTPServer/1.0)
        """
        algorithms = os.getenv("HTTP_COMPRESSION_ALGORITHMS", "deflate,gzip")
        return cls(
            algorithms=tuple(
                name.strip().lower() for name in algorithms.split(",") if name.strip()
            ),
            level=int(os.getenv("HTTP_COMPRESSION_LEVEL", "6")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
            server_name=os.getenv("HTTP_SERVER_NAME", "PyHTTPServer/1.0"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a typo in an encoding name fails immediately
        rather than silently disabling compression.
        """
        if not self.algorithms:
            raise ValueError("At least one compression algorithm is required")

        names = [name.lower() for name in self.algorithms]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate compression algorithms: {list(self.algorithms)}")

        known = available_algorithms()
        for name in names:
            if name not in known:
                raise ValueError(
                    f"Unknown compression algorithm: {name!r} (available: {', '.join(known)})"
                )

        if not 1 <= self.level <= 9:
            raise ValueError(f"level must be 1-9, got {self.level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}")
