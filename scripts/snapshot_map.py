#!/usr/bin/env python3
"""Render a one-off SituationRoom map snapshot to HTML.

Runs a single refresh of the live country layer for a topic and time range
(against GDELT directly, or against a running API with --api-url), installs
the tension-zone overlay and writes the result with folium.

Usage:
    python scripts/snapshot_map.py --topic protest --timespan 24h
    python scripts/snapshot_map.py --topic cyber --api-url http://localhost:8000
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure project root is on sys.path for consistent import resolution
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from config.defaults import DEFAULT_LOG_LEVEL, DEFAULT_TIMESPAN, DEFAULT_TOPIC  # noqa: E402
from config.settings import AppConfig  # noqa: E402
from situationroom.clients.events_api_client import EventsApiClient  # noqa: E402
from situationroom.models.query import TimeRange, Topic  # noqa: E402
from situationroom.service import EventService, LocalEventsSource  # noqa: E402
from situationroom.situation_room import SituationRoom  # noqa: E402
from situationroom.utils.logging_utils import configure_logging  # noqa: E402
from situationroom.visualization.map_export import render_map_html  # noqa: E402

logger = logging.getLogger("situationroom.snapshot")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapshot_map",
        description="SituationRoom — render a live map snapshot to HTML",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--topic", type=str, default=DEFAULT_TOPIC, choices=[t.value for t in Topic]
    )
    parser.add_argument(
        "--timespan", type=str, default=DEFAULT_TIMESPAN, choices=[t.value for t in TimeRange]
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Query a running SituationRoom API instead of GDELT directly",
    )
    parser.add_argument("--output", type=str, default=None, help="Output HTML path")
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


async def snapshot(config: AppConfig, topic: str, timespan: str, api_url: str | None, output: Path) -> Path:
    if api_url:
        source = EventsApiClient(api_url, config.events_api_timeout)
    else:
        source = LocalEventsSource(EventService(config))

    room = SituationRoom(config, source)
    surface = room.mount()
    room.set_topic(topic)
    room.set_time_range(timespan)
    surface.load()
    try:
        await room.controller.refresh_now()
        return render_map_html(surface, output, title=f"{topic} · last {timespan}")
    finally:
        room.close()


def main() -> None:
    """CLI entrypoint: refresh once, export and exit."""
    args = build_arg_parser().parse_args()
    configure_logging(log_level=args.log_level)

    config = AppConfig(log_level=args.log_level)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    output = Path(args.output or Path(config.output_root) / f"{args.topic}_{args.timespan}_{stamp}.html")

    try:
        path = asyncio.run(snapshot(config, args.topic, args.timespan, args.api_url, output))
    except KeyboardInterrupt:
        logger.info("Snapshot interrupted by user")
        sys.exit(0)
    except Exception as exc:
        logger.exception("Snapshot failed: %s", exc)
        sys.exit(1)
    logger.info("Snapshot written: %s", path)


if __name__ == "__main__":
    main()
