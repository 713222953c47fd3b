#!/usr/bin/env python3
"""SituationRoom API server — serves /api/gdelt-events and /api/osint-feed.

Usage:
    python scripts/serve.py
    python scripts/serve.py --host 0.0.0.0 --port 8080 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path for consistent import resolution
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import uvicorn  # noqa: E402

from config.defaults import DEFAULT_LOG_LEVEL  # noqa: E402
from config.settings import AppConfig  # noqa: E402
from situationroom.api.app import create_app  # noqa: E402
from situationroom.utils.logging_utils import configure_logging  # noqa: E402


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serve",
        description="SituationRoom — GDELT events and OSINT feed API",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity level",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Also log to this file")
    return parser


def main() -> None:
    """CLI entrypoint: configure logging, then serve the app with uvicorn."""
    args = build_arg_parser().parse_args()
    configure_logging(log_level=args.log_level, log_file=args.log_file)
    logger = logging.getLogger("situationroom.serve")

    config = AppConfig(log_level=args.log_level)
    if not config.newsapi_key:
        logger.warning("NEWSAPI_KEY is not set; /api/osint-feed will return HTTP 500")

    app = create_app(config)
    logger.info("Serving SituationRoom API on http://%s:%d", args.host, args.port)
    try:
        uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Server interrupted by user")


if __name__ == "__main__":
    main()
