"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

Run a file through the compression pipeline and print the HTTP response
a client would receive:

    python -m httpcompression report.json --accept-encoding "gzip, deflate"

    HTTP/1.1 200 OK
    Content-Type: application/json
    content-length: 412
    content-encoding: deflate
    ...

Useful for checking what a given Accept-Encoding header negotiates and
how large the result is.

    # Only the compressed body, to a file
    python -m httpcompression page.html -e gzip --body-only -o page.html.gz

    # Prefer gzip over deflate
    python -m httpcompression page.html -e "deflate, gzip" --algorithms gzip,deflate

=============================================================================
"""

import argparse
import mimetypes
import sys
from pathlib import Path

from .app import Application
from .config import CompressionConfig
from .http.context import HTTPContext
from .http.request import make_request
from .http.response import ok, read_body, write_response


def main(argv=None) -> int:
    """Parse arguments, run the pipeline, write the response."""
    env = CompressionConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="httpcompression",
        description="Show the HTTP response the compression pipeline produces for a file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "file",
        type=Path,
        help="File to serve as the response body",
    )

    parser.add_argument(
        "-e", "--accept-encoding",
        default=None,
        help="Accept-Encoding request header (default: header absent)",
    )

    parser.add_argument(
        "--algorithms",
        default=",".join(env.algorithms),
        help=f"Registered encodings in preference order (default: {','.join(env.algorithms)})",
    )

    parser.add_argument(
        "--level",
        type=int,
        default=env.level,
        help=f"Compression level 1-9 (default: {env.level})",
    )

    parser.add_argument(
        "--body-only",
        action="store_true",
        help="Write only the response body, not the status line and headers",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write to this file instead of stdout",
    )

    parser.add_argument(
        "--log-level",
        default=env.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Logging level (default: {env.log_level})",
    )

    args = parser.parse_args(argv)

    if not args.file.is_file():
        parser.error(f"not a file: {args.file}")

    config = CompressionConfig(
        algorithms=tuple(name.strip().lower() for name in args.algorithms.split(",") if name.strip()),
        level=args.level,
        log_level=args.log_level,
        log_format=env.log_format,
        server_name=env.server_name,
    )
    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    body = args.file.read_bytes()
    content_type = mimetypes.guess_type(args.file.name)[0] or "application/octet-stream"

    def serve_file(context: HTTPContext) -> None:
        context.response = ok(body, content_type=content_type)

    app = Application.from_config(serve_file, config)
    app.setup_logging()

    headers = {}
    if args.accept_encoding is not None:
        headers["Accept-Encoding"] = args.accept_encoding
    request = make_request(f"/{args.file.name}", headers)

    context = app.process(request)

    if args.output is not None:
        with open(args.output, "wb") as sink:
            _emit(context, sink, args.body_only, config.server_name)
    else:
        _emit(context, sys.stdout.buffer, args.body_only, config.server_name)
        sys.stdout.buffer.flush()

    return 0


def _emit(context: HTTPContext, sink, body_only: bool, server_name: str) -> None:
    if body_only:
        sink.write(read_body(context.response))
    else:
        write_response(context.response, sink, server_name)


if __name__ == "__main__":
    sys.exit(main())
