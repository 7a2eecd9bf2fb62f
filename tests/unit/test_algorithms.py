"""
Unit tests for compression algorithms and the algorithm registry.
"""

import gzip
import io
import zlib

import pytest

from httpcompression.compression import algorithms
from httpcompression.compression.algorithms import (
    CompressionAlgorithm,
    DeflateAlgorithm,
    DeflateStream,
    GZipAlgorithm,
    DEFLATE,
    GZIP,
    available_algorithms,
    create_algorithm,
    register_algorithm,
)


class TestDeflate:
    """Tests for the deflate algorithm."""

    def test_token(self):
        """Test the encoding token."""
        assert DeflateAlgorithm.name == "deflate"
        assert DEFLATE.name == "deflate"

    def test_round_trip(self, large_body: bytes):
        """Test that zlib decodes what deflate produces."""
        compressed = DEFLATE.compress_bytes(large_body)

        assert zlib.decompress(compressed) == large_body
        assert len(compressed) < len(large_body)

    def test_empty_body(self):
        """Test compressing nothing still yields a valid stream."""
        assert zlib.decompress(DEFLATE.compress_bytes(b"")) == b""

    def test_levels(self, large_body: bytes):
        """Test that both extreme levels decode correctly."""
        fast = DeflateAlgorithm(level=1).compress_bytes(large_body)
        best = DeflateAlgorithm(level=9).compress_bytes(large_body)

        assert zlib.decompress(fast) == large_body
        assert zlib.decompress(best) == large_body


class TestDeflateStream:
    """Tests for the sink-wrapping deflate stream."""

    def test_close_keeps_sink_open(self):
        """Test that closing the stream leaves the sink usable."""
        sink = io.BytesIO()
        stream = DeflateStream(sink)
        stream.write(b"hello world")
        stream.close()

        assert not sink.closed
        assert zlib.decompress(sink.getvalue()) == b"hello world"

    def test_trailer_written_on_close(self):
        """Test that the stream is incomplete until closed."""
        sink = io.BytesIO()
        stream = DeflateStream(sink)
        stream.write(b"hello world" * 10)
        stream.flush()

        before_close = sink.getvalue()
        stream.close()

        assert len(sink.getvalue()) > len(before_close)
        with pytest.raises(zlib.error):
            zlib.decompress(before_close)

    def test_multiple_writes(self):
        """Test that chunks are compressed as one stream."""
        sink = io.BytesIO()
        with DeflateStream(sink) as stream:
            for chunk in (b"hello", b" ", b"world"):
                assert stream.write(chunk) == len(chunk)

        assert zlib.decompress(sink.getvalue()) == b"hello world"

    def test_write_after_close(self):
        """Test that a closed stream rejects writes."""
        stream = DeflateStream(io.BytesIO())
        stream.close()

        with pytest.raises(ValueError):
            stream.write(b"late")

    def test_close_twice(self):
        """Test that a second close is a no-op."""
        sink = io.BytesIO()
        stream = DeflateStream(sink)
        stream.close()
        length = len(sink.getvalue())
        stream.close()

        assert len(sink.getvalue()) == length


class TestGZip:
    """Tests for the gzip algorithm."""

    def test_token(self):
        """Test the encoding token."""
        assert GZIP.name == "gzip"

    def test_round_trip(self, large_body: bytes):
        """Test that gzip decodes what gzip produces."""
        compressed = GZIP.compress_bytes(large_body)

        assert compressed[:2] == b"\x1f\x8b"  # gzip magic number
        assert gzip.decompress(compressed) == large_body

    def test_deterministic(self):
        """Test that identical bodies compress to identical bytes."""
        assert GZIP.compress_bytes(b"hello world") == GZIP.compress_bytes(b"hello world")

    def test_close_keeps_sink_open(self):
        """Test that GzipFile leaves the sink open."""
        sink = io.BytesIO()
        with GZIP.open_stream(sink) as stream:
            stream.write(b"hello world")

        assert not sink.closed
        assert gzip.decompress(sink.getvalue()) == b"hello world"


class TestAlgorithmBase:
    """Tests for shared algorithm behaviour."""

    @pytest.mark.parametrize("level", [0, 10, -1])
    def test_invalid_level(self, level: int):
        """Test that levels outside 1-9 are rejected."""
        with pytest.raises(ValueError):
            GZipAlgorithm(level=level)

    def test_matches_ignores_case(self):
        """Test token matching."""
        assert DEFLATE.matches("deflate")
        assert DEFLATE.matches("DEFLATE")
        assert not DEFLATE.matches("deflate;q=1.0")
        assert not DEFLATE.matches("gzip")

    def test_repr(self):
        """Test repr shows the level."""
        assert repr(GZipAlgorithm(level=9)) == "GZipAlgorithm(level=9)"


class TestRegistry:
    """Tests for the algorithm registry."""

    def test_builtins_registered(self):
        """Test that deflate and gzip are available."""
        assert available_algorithms()[:2] == ["deflate", "gzip"]

    def test_create_by_token(self):
        """Test creating algorithms by name, case-insensitively."""
        algorithm = create_algorithm(" GZip ", level=3)

        assert isinstance(algorithm, GZipAlgorithm)
        assert algorithm.level == 3

    def test_unknown_token(self):
        """Test that unknown tokens raise ValueError."""
        with pytest.raises(ValueError, match="Unknown compression algorithm"):
            create_algorithm("br")

    def test_register_custom_algorithm(self, monkeypatch):
        """Test registering a new algorithm with the decorator."""
        monkeypatch.setattr(algorithms, "_REGISTRY", dict(algorithms._REGISTRY))

        @register_algorithm
        class GZipAliasAlgorithm(CompressionAlgorithm):
            name = "x-gzip"

            def open_stream(self, sink):
                return gzip.GzipFile(fileobj=sink, mode="wb")

        assert "x-gzip" in available_algorithms()
        assert isinstance(create_algorithm("x-gzip"), GZipAliasAlgorithm)

    def test_mixed_case_name_matches(self, monkeypatch):
        """Test that a mixed-case name still matches lowercased tokens."""
        monkeypatch.setattr(algorithms, "_REGISTRY", dict(algorithms._REGISTRY))

        @register_algorithm
        class MixedCaseGZip(CompressionAlgorithm):
            name = "X-GZip"

            def open_stream(self, sink):
                return gzip.GzipFile(fileobj=sink, mode="wb")

        algorithm = create_algorithm("x-gzip")

        assert isinstance(algorithm, MixedCaseGZip)
        assert algorithm.matches("x-gzip")
        assert algorithm.matches("X-GZIP")

    def test_register_requires_token(self, monkeypatch):
        """Test that an algorithm without a name can't be registered."""
        monkeypatch.setattr(algorithms, "_REGISTRY", dict(algorithms._REGISTRY))

        class Nameless(CompressionAlgorithm):
            def open_stream(self, sink):
                return sink

        with pytest.raises(ValueError):
            register_algorithm(Nameless)
