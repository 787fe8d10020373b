"""Generic feed discovery: URL patterns and HTML ``<link rel="alternate">`` tags."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterable
from urllib.parse import urljoin, urlsplit

from feedfinder.core.logging import get_logger
from feedfinder.models.feed import DiscoveredFeed
from feedfinder.services.feed_discovery.base import DiscoveryContext, DiscoveryService
from feedfinder.services.http import HTML_ACCEPT_HEADER, HttpService, get_http_service

logger = get_logger(__name__)

FEED_EXTENSIONS = (".rss", ".atom", ".xml")

COMMON_FEED_PATHS = (
    "/feed",
    "/rss",
    "/atom",
    "/atom.xml",
    "/feed.xml",
    "/rss.xml",
    "/index.xml",
    "/feeds/posts/default",
    "/feeds/all.atom",
    "/feed/atom/",
    "/blog/feed",
    "/blog/rss",
    "/blog/rss.xml",
    "/blog/feed.xml",
    "/blog/atom.xml",
)

PATH_RELATIVE_FEED_PATHS = (
    "feed",
    "rss",
    "atom",
    "atom.xml",
    "feed.xml",
    "rss.xml",
    "index.xml",
)

_FEED_LINK_TAG_REGEX = re.compile(
    r"<link[^>]*type=[\"'](application/rss\+xml|application/atom\+xml)[\"'][^>]*>",
    re.IGNORECASE,
)
_HREF_REGEX = re.compile(r"href=[\"']([^\"']+)[\"']", re.IGNORECASE)


def extract_feed_links(html_content: str, page_url: str) -> list[str]:
    """Feed URLs advertised by RSS/Atom ``<link>`` tags in a page.

    Args:
        html_content: Raw HTML content
        page_url: URL of the page, for resolving relative hrefs

    Returns:
        Absolute feed URLs in document order
    """
    feed_urls: list[str] = []
    for match in _FEED_LINK_TAG_REGEX.finditer(html_content):
        href_match = _HREF_REGEX.search(match.group(0))
        if not href_match:
            continue
        feed_urls.append(urljoin(page_url, href_match.group(1).strip()))
    return feed_urls


class StandardDiscoveryService(DiscoveryService):
    """
    Fallback discovery for any URL.

    Probes the URL with feed extensions, the usual feed paths on the site and
    under the submitted path, then the feeds the page itself links to.
    """

    priority = 100

    def __init__(self, http_service: HttpService | None = None):
        self.http_service = http_service or get_http_service()

    def can_handle(self, url: str) -> bool:
        return True

    async def discover(self, url: str, context: DiscoveryContext) -> list[DiscoveredFeed]:
        discovered: list[DiscoveredFeed] = []
        try:
            parts = urlsplit(url)
            if not parts.scheme or not parts.hostname:
                return []
            port = f":{parts.port}" if parts.port else ""
            base_url = f"{parts.scheme}://{parts.hostname}{port}"
            original_path = parts.path or "/"
            input_path = original_path if original_path.endswith("/") else f"{original_path}/"

            if not original_path.endswith(FEED_EXTENSIONS):
                discovered += await _validate_all(
                    context, (f"{base_url}{original_path}{ext}" for ext in FEED_EXTENSIONS)
                )

            discovered += await _validate_all(
                context, (f"{base_url}{path}" for path in COMMON_FEED_PATHS)
            )

            if input_path != "/":
                discovered += await _validate_all(
                    context, (f"{base_url}{input_path}{path}" for path in PATH_RELATIVE_FEED_PATHS)
                )

            discovered += await self._discover_from_html(url, context)
            return discovered

        except Exception as e:  # noqa: BLE001
            logger.exception(
                "Standard feed discovery error: %s",
                e,
                extra={
                    "component": "feed_discovery",
                    "operation": "standard_discovery",
                    "context_data": {"input_url": url},
                },
            )
            context.telemetry.capture_exception(
                e, "error", {"operation": "standard_discovery"}, {"input_url": url}
            )
            return []

    async def _discover_from_html(
        self, url: str, context: DiscoveryContext
    ) -> list[DiscoveredFeed]:
        try:
            response = await self.http_service.fetch(url, headers={"Accept": HTML_ACCEPT_HEADER})
        except Exception as e:  # noqa: BLE001
            # Feeds may still have turned up through the URL patterns.
            logger.debug(
                "HTML fetch failed during discovery: %s",
                e,
                extra={
                    "component": "feed_discovery",
                    "operation": "standard_discovery_html",
                    "context_data": {"input_url": url},
                },
            )
            return []

        feed_urls = extract_feed_links(response.text, str(response.url))
        return await _validate_all(context, feed_urls)


async def _validate_all(context: DiscoveryContext, urls: Iterable[str]) -> list[DiscoveredFeed]:
    results = await asyncio.gather(*(context.validate_feed(url) for url in urls))
    return [feed for feed in results if feed is not None]
