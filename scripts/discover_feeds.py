#!/usr/bin/env python3
"""Discover feeds for a URL and print them as JSON.

Usage:
    python scripts/discover_feeds.py https://podcasts.apple.com/us/podcast/name/id1234567890
    python scripts/discover_feeds.py https://www.reddit.com/r/python --telemetry
"""

from __future__ import annotations

# ruff: noqa: E402
import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from feedfinder.core.logging import get_logger, setup_logging
from feedfinder.core.timing import timed
from feedfinder.services.feed_discovery import create_discovery_registry
from feedfinder.services.telemetry import LoggingTelemetry, NullTelemetry

logger = get_logger(__name__)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Discover feeds for a URL")
    parser.add_argument("url", help="Site, podcast page or feed URL")
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Log discovery spans and breadcrumbs",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser.parse_args()


async def _discover(url: str, with_telemetry: bool) -> list[dict]:
    telemetry = LoggingTelemetry() if with_telemetry else NullTelemetry()
    registry = create_discovery_registry(telemetry=telemetry)
    with timed(f"discover feeds for {url}", component="feed_discovery"):
        feeds = await registry.discover(url)
    return [feed.model_dump(exclude_none=True) for feed in feeds]


def main() -> int:
    args = _parse_args()
    setup_logging(level=args.log_level)

    feeds = asyncio.run(_discover(args.url, args.telemetry))
    print(json.dumps(feeds, indent=2, ensure_ascii=False))
    if not feeds:
        logger.info("No feeds discovered for %s", args.url)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
