"""Shared feed validation for discovery services."""

from __future__ import annotations

import feedparser

from feedfinder.core.logging import get_logger
from feedfinder.models.feed import DiscoveredFeed, FeedType
from feedfinder.services.feed_discovery.base import FeedValidator
from feedfinder.services.http import FEED_ACCEPT_HEADER, HttpService, get_http_service
from feedfinder.utils.text_sanitizer import strip_html
from feedfinder.utils.url_normalize import normalize_feed_url

logger = get_logger(__name__)

DEFAULT_FEED_TITLE = "Untitled Feed"


def feed_type_from_version(version: str | None) -> FeedType | None:
    """Map a feedparser ``version`` string to a feed type.

    >>> feed_type_from_version("atom10")
    'atom'
    >>> feed_type_from_version("rss10")
    'rdf'
    >>> feed_type_from_version("")
    """
    if not version:
        return None
    if version.startswith("atom"):
        return "atom"
    if version in {"rss090", "rss10"}:
        return "rdf"
    if version.startswith("json"):
        return "json"
    if version.startswith("rss"):
        return "rss"
    return None


def create_feed_validator(
    seen_urls: set[str],
    seen_feed_ids: set[str],
    http_service: HttpService | None = None,
) -> FeedValidator:
    """Create a feed validator bound to one request's dedup sets.

    Args:
        seen_urls: Normalized final URLs already discovered.
        seen_feed_ids: Atom feed ids already discovered.
        http_service: HTTP client; the shared one when omitted.

    Returns:
        Async function taking a candidate URL and returning a DiscoveredFeed,
        or None when the URL is unreachable, not a feed, or a duplicate.
    """
    http = http_service or get_http_service()

    async def validate_feed(feed_url: str) -> DiscoveredFeed | None:
        try:
            response = await http.fetch(
                feed_url, headers={"Accept": FEED_ACCEPT_HEADER}, log_status_errors=False
            )
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "Feed candidate unreachable: %s",
                exc,
                extra={
                    "component": "feed_discovery",
                    "operation": "validate_feed",
                    "context_data": {"feed_url": feed_url},
                },
            )
            return None

        normalized_url = normalize_feed_url(str(response.url))
        if normalized_url in seen_urls:
            return None
        # Mark before parsing so concurrent checks of the same feed lose the race.
        seen_urls.add(normalized_url)

        parsed = feedparser.parse(response.content)
        feed_type = feed_type_from_version(parsed.get("version"))
        if feed_type is None:
            return None

        feed = parsed.get("feed", {})
        feed_id = str(feed.get("id") or "") if feed_type == "atom" else ""
        if feed_id:
            if feed_id in seen_feed_ids:
                return None
            seen_feed_ids.add(feed_id)

        description = strip_html(feed.get("subtitle") or feed.get("description")) or None
        image = feed.get("image") or {}
        icon_url = image.get("href") or feed.get("icon") or None

        return DiscoveredFeed(
            url=feed_url,
            title=feed.get("title") or DEFAULT_FEED_TITLE,
            description=description,
            type=feed_type,
            icon_url=icon_url,
        )

    return validate_feed
