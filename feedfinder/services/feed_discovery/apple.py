"""Apple Podcasts discovery via the iTunes lookup API."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

import httpx

from feedfinder.core.logging import get_logger
from feedfinder.core.settings import get_settings
from feedfinder.models.feed import DiscoveredFeed
from feedfinder.services.feed_discovery.base import DiscoveryContext, DiscoveryService
from feedfinder.services.http import HttpFetchError, HttpService, get_http_service
from feedfinder.utils.domain_matcher import hostname_of, is_subdomain_of

logger = get_logger(__name__)

APPLE_PODCAST_ID_REGEX = re.compile(r"/id(?P<podcast_id>\d+)/?$")
ITUNES_LOOKUP_TIMEOUT_SECONDS = 10.0


class AppleDiscoveryService(DiscoveryService):
    """
    Resolves Apple Podcasts pages to the podcast's RSS feed.

    Looks the podcast id up with the iTunes API, validates the ``feedUrl`` it
    reports and overlays Apple's title, description and artwork on the result.
    Pages without a podcast id fall through to the next service.
    """

    priority = 10

    def __init__(self, http_service: HttpService | None = None):
        self.http_service = http_service or get_http_service()

    def can_handle(self, url: str) -> bool:
        hostname = hostname_of(url)
        return hostname is not None and is_subdomain_of(hostname, "apple.com")

    async def discover(self, url: str, context: DiscoveryContext) -> list[DiscoveredFeed]:
        telemetry = context.telemetry
        with telemetry.start_span(
            "feed.discovery.apple", "Apple Podcast Discovery", {"url": url}
        ) as span:
            try:
                podcast_id = extract_podcast_id(url)
                if not podcast_id:
                    span.set_status("error", "No podcast id in URL")
                    return []
                span.set_attribute("podcast_id", podcast_id)

                try:
                    payload = await self._lookup(podcast_id)
                except httpx.HTTPStatusError as e:
                    span.set_status("error", "iTunes lookup failed")
                    telemetry.capture_exception(
                        e,
                        "warning",
                        {"operation": "apple_discovery_lookup"},
                        {
                            "input_url": url,
                            "podcast_id": podcast_id,
                            "status_code": e.response.status_code,
                        },
                    )
                    return []
                except HttpFetchError as e:
                    span.set_status("error", "iTunes lookup unreachable")
                    telemetry.capture_exception(
                        e,
                        "warning",
                        {"operation": "apple_discovery_lookup"},
                        {"input_url": url, "podcast_id": podcast_id},
                    )
                    return []

                podcast = _first_podcast_result(payload)
                if podcast is None:
                    span.set_status("error", "No podcast in lookup results")
                    return []

                feed_url = podcast.get("feedUrl")
                if not feed_url:
                    span.set_status("error", "Podcast has no feed URL")
                    return []

                discovered = await context.validate_feed(feed_url)
                if discovered is None:
                    span.set_status("error", "Feed validation failed")
                    telemetry.capture_exception(
                        ValueError(f"Apple Podcasts feed failed validation: {feed_url}"),
                        "error",
                        {"operation": "apple_discovery_validation"},
                        {"input_url": url, "podcast_id": podcast_id, "feed_url": feed_url},
                    )
                    return []

                span.set_status("ok")
                span.set_attribute("feed_validated", True)
                return [_overlay_podcast_metadata(discovered, podcast)]

            except Exception as e:  # noqa: BLE001
                span.set_status("error", "Discovery failed")
                logger.exception(
                    "Apple Podcast discovery error: %s",
                    e,
                    extra={
                        "component": "feed_discovery",
                        "operation": "apple_discovery",
                        "context_data": {"input_url": url},
                    },
                )
                telemetry.capture_exception(
                    e, "error", {"operation": "apple_discovery"}, {"input_url": url}
                )
                return []

    async def _lookup(self, podcast_id: str) -> dict[str, Any]:
        settings = get_settings()
        params = {"id": podcast_id, "entity": "podcast"}
        if settings.discovery_itunes_country:
            params["country"] = settings.discovery_itunes_country.lower()
        payload = await self.http_service.fetch_json(
            settings.itunes_lookup_url,
            params=params,
            timeout=ITUNES_LOOKUP_TIMEOUT_SECONDS,
        )
        return payload if isinstance(payload, dict) else {}


def extract_podcast_id(url: str) -> str | None:
    """Podcast id from an Apple Podcasts URL.

    Supports URLs like:
    - https://podcasts.apple.com/us/podcast/name/id1234567890
    - https://itunes.apple.com/us/podcast/name/id1234567890?mt=2
    - https://podcasts.apple.com/us/podcast/name/id1234567890/#episodes

    Only the path is matched, so the id must be its last segment.
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    match = APPLE_PODCAST_ID_REGEX.search(path)
    return match.group("podcast_id") if match else None


def _first_podcast_result(payload: dict[str, Any]) -> dict[str, Any] | None:
    results = payload.get("results") or []
    if payload.get("resultCount") == 0 or not results:
        return None

    first = results[0]
    if not isinstance(first, dict):
        return None
    # Lookups by id can return songs, apps or audiobooks; only accept podcasts.
    if first.get("kind") != "podcast":
        return None
    if first.get("wrapperType") not in (None, "track"):
        return None
    return first


def _overlay_podcast_metadata(feed: DiscoveredFeed, podcast: dict[str, Any]) -> DiscoveredFeed:
    return feed.model_copy(
        update={
            "title": podcast.get("collectionName") or feed.title,
            "description": (
                podcast.get("longDescription")
                or podcast.get("shortDescription")
                or feed.description
            ),
            "icon_url": podcast.get("artworkUrl600") or feed.icon_url,
        }
    )
