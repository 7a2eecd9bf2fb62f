"""
Unit tests for the command line entry point.
"""

import gzip
import zlib
from pathlib import Path

import pytest

from httpcompression.__main__ import main


@pytest.fixture
def report(tmp_path: Path) -> Path:
    path = tmp_path / "report.json"
    path.write_bytes(b'{"id": 1, "status": "ok"}\n' * 50)
    return path


class TestMain:
    """Tests for main()."""

    def test_body_only_to_file(self, report: Path, tmp_path: Path):
        """Test writing the compressed body to a file."""
        output = tmp_path / "report.json.gz"

        assert main([str(report), "-e", "gzip", "--body-only", "-o", str(output)]) == 0

        assert gzip.decompress(output.read_bytes()) == report.read_bytes()

    def test_full_response_to_stdout(self, report: Path, capsysbinary):
        """Test that the full message goes to stdout."""
        main([str(report), "-e", "gzip, deflate"])

        head, body = capsysbinary.readouterr().out.split(b"\r\n\r\n", 1)
        assert head.startswith(b"HTTP/1.1 200 OK")
        assert b"content-encoding: deflate" in head
        assert b"Content-Type: application/json" in head
        assert zlib.decompress(body) == report.read_bytes()

    def test_absent_header_plain_body(self, report: Path, tmp_path: Path):
        """Test that no Accept-Encoding leaves the body as is."""
        output = tmp_path / "plain"

        main([str(report), "--body-only", "-o", str(output)])

        assert output.read_bytes() == report.read_bytes()

    def test_algorithm_preference(self, report: Path, tmp_path: Path):
        """Test that --algorithms changes the preference order."""
        output = tmp_path / "out"

        main([str(report), "-e", "gzip, deflate", "--algorithms", "gzip,deflate", "-o", str(output)])

        assert b"content-encoding: gzip" in output.read_bytes()

    @pytest.mark.parametrize("extra", [
        ["--algorithms", "br"],
        ["--algorithms", "gzip,gzip"],
        ["--level", "12"],
    ])
    def test_invalid_options_exit(self, report: Path, extra: list):
        """Test that invalid configuration is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main([str(report)] + extra)

        assert exc_info.value.code == 2

    def test_missing_file_exits(self, tmp_path: Path):
        """Test that a missing input file is a usage error."""
        with pytest.raises(SystemExit):
            main([str(tmp_path / "missing.txt")])
