#!/usr/bin/env python3
"""Print the comment link of every entry in a feed.

Usage:
    python scripts/extract_comment_links.py https://news.ycombinator.com/rss
    python scripts/extract_comment_links.py ./saved_feed.xml --limit 10
"""

from __future__ import annotations

# ruff: noqa: E402
import argparse
import sys
from pathlib import Path

import feedparser

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from feedfinder.core.logging import get_logger, setup_logging
from feedfinder.core.settings import get_settings
from feedfinder.models.feed import FeedItem
from feedfinder.services.comment_links import create_comment_link_registry

logger = get_logger(__name__)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract comment links from a feed")
    parser.add_argument("feed", help="Feed URL or local file path")
    parser.add_argument("--limit", type=int, default=None, help="Only show the first N entries")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    setup_logging()

    parsed = feedparser.parse(args.feed, agent=get_settings().http_user_agent)
    if parsed.get("bozo") and not parsed.entries:
        logger.error("Could not parse feed %s: %s", args.feed, parsed.get("bozo_exception"))
        return 1

    registry = create_comment_link_registry()
    entries = parsed.entries[: args.limit] if args.limit else parsed.entries
    found = 0
    for entry in entries:
        item = FeedItem.from_entry(entry)
        comment_link = registry.extract(item)
        found += int(comment_link is not None)
        print(f"{item.title or item.link or '(untitled)'}\n    {comment_link or '-'}")

    logger.info("Found comment links for %s of %s entries", found, len(entries))
    return 0


if __name__ == "__main__":
    sys.exit(main())
