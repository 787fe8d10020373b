"""Reddit discovery: subreddit and user feeds plus subreddit icons."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from feedfinder.core.logging import get_logger
from feedfinder.core.settings import get_settings
from feedfinder.models.feed import DiscoveredFeed
from feedfinder.services.feed_discovery.base import DiscoveryContext, DiscoveryService
from feedfinder.services.http import HttpService, get_http_service
from feedfinder.utils.domain_matcher import hostname_of

logger = get_logger(__name__)

# Subreddit names are 3-21 characters, usernames 3-20; both word chars or "-".
REDDIT_PATH_REGEX = re.compile(r"/r/(?P<subreddit>[\w-]{3,21})|/user/(?P<username>[\w-]{3,20})")


class RedditDiscoveryService(DiscoveryService):
    priority = 10

    def __init__(self, http_service: HttpService | None = None):
        self.http_service = http_service or get_http_service()

    def can_handle(self, url: str) -> bool:
        hostname = hostname_of(url)
        return hostname is not None and "reddit.com" in hostname

    async def discover(self, url: str, context: DiscoveryContext) -> list[DiscoveredFeed]:
        telemetry = context.telemetry
        with telemetry.start_span(
            "feed.discovery.reddit", "Reddit Feed Discovery", {"url": url}
        ) as span:
            try:
                parts = urlsplit(url)
                base_url = f"{parts.scheme}://{parts.hostname}"

                match = REDDIT_PATH_REGEX.search(parts.path)
                if not match:
                    span.set_status("error", "Not a subreddit or user URL")
                    return []

                subreddit = match.group("subreddit")
                username = match.group("username")
                icon_url = None
                if subreddit:
                    feed_url = f"{base_url}/r/{subreddit}/.rss"
                    icon_url = await self._subreddit_icon(subreddit)
                    span.set_attribute("feed_type", "subreddit")
                    span.set_attribute("subreddit", subreddit)
                else:
                    feed_url = f"{base_url}/user/{username}/.rss"
                    span.set_attribute("feed_type", "user")
                    span.set_attribute("username", username)

                discovered = await context.validate_feed(feed_url)
                if discovered is None:
                    span.set_status("error", "Feed validation failed")
                    return []

                span.set_status("ok")
                span.set_attribute("feed_validated", True)
                if icon_url:
                    span.set_attribute("icon_url", icon_url)
                    discovered = discovered.model_copy(update={"icon_url": icon_url})
                return [discovered]

            except Exception as e:  # noqa: BLE001
                span.set_status("error", "Discovery failed")
                logger.exception(
                    "Reddit feed discovery error: %s",
                    e,
                    extra={
                        "component": "feed_discovery",
                        "operation": "reddit_discovery",
                        "context_data": {"input_url": url},
                    },
                )
                telemetry.capture_exception(
                    e, "error", {"operation": "reddit_discovery"}, {"input_url": url}
                )
                return []

    async def _subreddit_icon(self, subreddit: str) -> str | None:
        """Icon from the subreddit's about.json; None on any failure."""
        about_url = f"https://www.reddit.com/r/{subreddit}/about.json"
        try:
            payload = await self.http_service.fetch_json(
                about_url, timeout=get_settings().reddit_icon_timeout_seconds
            )
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Failed to fetch icon for r/%s: %s",
                subreddit,
                e,
                extra={
                    "component": "feed_discovery",
                    "operation": "reddit_icon",
                    "context_data": {"subreddit": subreddit},
                },
            )
            return None

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            return None
        # community_icon is the current icon, icon_img the legacy one.
        icon_url = data.get("community_icon") or data.get("icon_img")
        if not icon_url:
            return None
        # Reddit appends signed, HTML-escaped query params to icon URLs.
        return icon_url.split("?")[0]
