"""
=============================================================================
COMPRESSION ALGORITHMS
=============================================================================

Each algorithm is a named stream factory: give it a binary sink, get back
a writable stream that compresses whatever is written into it.

    ┌──────────┬───────────────────────────────┬────────────────────────┐
    │  Token   │  Stream                       │  Wire format           │
    ├──────────┼───────────────────────────────┼────────────────────────┤
    │  deflate │  DeflateStream (zlib)         │  zlib header + deflate │
    │  gzip    │  gzip.GzipFile(fileobj=sink)  │  gzip header + deflate │
    │          │                               │  + CRC32/size trailer  │
    └──────────┴───────────────────────────────┴────────────────────────┘

The token is used twice: matched against the client's Accept-Encoding
and written back as Content-Encoding.

=============================================================================
THE STREAM CONTRACT
=============================================================================

    with algorithm.open_stream(sink) as stream:
        stream.write(b"...")      # any number of writes
        stream.flush()
    # closing the stream finishes compression...
    sink.getvalue()               # ...and the sink is still usable

The stream WRAPS the sink: closing the stream never closes the sink.
Any algorithm that can offer this contract can be registered.

=============================================================================
REGISTRY
=============================================================================

Algorithm classes register under their token so configuration can refer
to them by name:

    @register_algorithm
    class ZstdAlgorithm(CompressionAlgorithm):
        name = "zstd"
        ...

    create_algorithm("zstd", level=3)

The registry only builds algorithms. Choosing which one to apply for a
request is done by CompressionMiddleware, scanning its own ordered tuple.

=============================================================================
"""

from abc import ABC, abstractmethod
from io import BytesIO, RawIOBase
from typing import BinaryIO, Dict, List, Type
import gzip
import zlib

from ..http.response import Response
from .response import CompressedResponse


DEFAULT_LEVEL = 6


class CompressionAlgorithm(ABC):
    """
    Base class for content-coding algorithms.

    Instances hold only their configuration (the level), so one instance
    can serve any number of concurrent requests.
    """

    name: str = ""

    def __init__(self, level: int = DEFAULT_LEVEL):
        """
        Args:
            level: zlib compression level (1-9).
                  1 = fastest, least compression
                  6 = balanced (default)
                  9 = slowest, best compression
        """
        if not 1 <= level <= 9:
            raise ValueError(f"Compression level must be 1-9, got {level}")
        self.level = level

    @abstractmethod
    def open_stream(self, sink: BinaryIO) -> BinaryIO:
        """
        Open a compressing stream over a sink.

        The returned stream must not close the sink when it is closed.
        """

    def matches(self, token: str) -> bool:
        """Check an Accept-Encoding token against this algorithm's name."""
        return token.lower() == self.name.lower()

    def compress(self, response: Response) -> CompressedResponse:
        """Compress a response's body and rewrite its headers."""
        return CompressedResponse.create(response, self)

    def compress_bytes(self, data: bytes) -> bytes:
        """
        Compress raw bytes with this algorithm's wire format.

        Same write, flush, close sequence as CompressedResponse.create(),
        so the output is byte-identical to a compressed response body.
        """
        with BytesIO() as sink:
            with self.open_stream(sink) as stream:
                stream.write(data)
                stream.flush()
            return sink.getvalue()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(level={self.level})"


# =============================================================================
# REGISTRY
# =============================================================================

_REGISTRY: Dict[str, Type[CompressionAlgorithm]] = {}


def register_algorithm(cls: Type[CompressionAlgorithm]) -> Type[CompressionAlgorithm]:
    """
    Register an algorithm class under its token.

    Usable as a class decorator. Re-registering a token replaces the
    previous class.
    """
    if not cls.name:
        raise ValueError(f"{cls.__name__} has no encoding token")
    _REGISTRY[cls.name.lower()] = cls
    return cls


def create_algorithm(name: str, level: int = DEFAULT_LEVEL) -> CompressionAlgorithm:
    """
    Instantiate a registered algorithm by token (case-insensitive).

    Raises:
        ValueError: No algorithm is registered under that token
    """
    try:
        cls = _REGISTRY[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown compression algorithm: {name!r} "
            f"(available: {', '.join(available_algorithms())})"
        ) from None
    return cls(level=level)


def available_algorithms() -> List[str]:
    """Get the registered tokens in registration order."""
    return list(_REGISTRY)


# =============================================================================
# DEFLATE
# =============================================================================

class DeflateStream(RawIOBase):
    """
    Write-only stream that deflate-compresses into a wrapped sink.

    Uses the zlib container (RFC 1950), the format the HTTP "deflate"
    content-coding names. close() finishes the compressor and leaves the
    sink open.
    """

    def __init__(self, fileobj: BinaryIO, level: int = DEFAULT_LEVEL):
        self._fileobj = fileobj
        self._compressor = zlib.compressobj(level, zlib.DEFLATED, zlib.MAX_WBITS)

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("write to closed DeflateStream")
        self._fileobj.write(self._compressor.compress(data))
        return len(data)

    def flush(self) -> None:
        # Sync flush, as GzipFile.flush() does; no-op once finished
        if self._compressor is not None and not self.closed:
            self._fileobj.write(self._compressor.flush(zlib.Z_SYNC_FLUSH))

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._fileobj.write(self._compressor.flush(zlib.Z_FINISH))
        finally:
            self._compressor = None
            super().close()


@register_algorithm
class DeflateAlgorithm(CompressionAlgorithm):
    """The "deflate" content-coding (zlib format)."""

    name = "deflate"

    def open_stream(self, sink: BinaryIO) -> BinaryIO:
        return DeflateStream(sink, self.level)


# =============================================================================
# GZIP
# =============================================================================

@register_algorithm
class GZipAlgorithm(CompressionAlgorithm):
    """The "gzip" content-coding."""

    name = "gzip"

    def open_stream(self, sink: BinaryIO) -> BinaryIO:
        # GzipFile never closes a fileobj it was handed; mtime=0 keeps
        # output identical for identical bodies
        return gzip.GzipFile(fileobj=sink, mode="wb", compresslevel=self.level, mtime=0)


# Shared default instances, safe to use from any thread
DEFLATE = DeflateAlgorithm()
GZIP = GZipAlgorithm()
