"""
Command line entry point.

    python -m markdown2pdf                      # MCP server on stdio
    python -m markdown2pdf --transport http     # FastAPI service via uvicorn
"""

import argparse
import asyncio
import logging
import signal
import sys

from .config import get_settings
from .resources import temp_files

logger = logging.getLogger("markdown2pdf")


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the MCP stream."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr
    )


def _handle_terminate(signum, frame) -> None:
    logger.info(f"Received signal {signum}, shutting down")
    temp_files.drain()
    raise SystemExit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdown2pdf",
        description="Markdown to PDF tool server (MCP stdio or HTTP)"
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve the tool on (default: stdio)"
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind address")
    parser.add_argument("--port", type=int, default=8001, help="HTTP port")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    temp_files.init()
    signal.signal(signal.SIGTERM, _handle_terminate)

    try:
        if args.transport == "http":
            import uvicorn

            uvicorn.run("markdown2pdf.app:app", host=args.host, port=args.port, log_level=settings.log_level.lower())
        else:
            from .mcp_server import serve

            asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        temp_files.drain()

    return 0


if __name__ == "__main__":
    sys.exit(main())
