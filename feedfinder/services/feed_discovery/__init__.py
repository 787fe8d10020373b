"""Feed discovery for user-submitted URLs."""

from feedfinder.models.feed import DiscoveredFeed
from feedfinder.services.feed_discovery.apple import AppleDiscoveryService
from feedfinder.services.feed_discovery.base import (
    DiscoveryContext,
    DiscoveryService,
    FeedValidator,
)
from feedfinder.services.feed_discovery.reddit import RedditDiscoveryService
from feedfinder.services.feed_discovery.registry import DiscoveryRegistry
from feedfinder.services.feed_discovery.standard import StandardDiscoveryService
from feedfinder.services.feed_discovery.validator import create_feed_validator
from feedfinder.services.http import HttpService
from feedfinder.services.telemetry import Telemetry


def create_discovery_registry(
    http_service: HttpService | None = None,
    telemetry: Telemetry | None = None,
) -> DiscoveryRegistry:
    """Build a registry with the platform services and the generic fallback."""
    return DiscoveryRegistry(
        [
            AppleDiscoveryService(http_service),
            RedditDiscoveryService(http_service),
            StandardDiscoveryService(http_service),
        ],
        telemetry=telemetry,
        http_service=http_service,
    )


async def discover_feeds(
    url: str, registry: DiscoveryRegistry | None = None
) -> list[DiscoveredFeed]:
    """Discover feeds for ``url`` with ``registry`` or a default one."""
    return await (registry or create_discovery_registry()).discover(url)


__all__ = [
    "AppleDiscoveryService",
    "DiscoveredFeed",
    "DiscoveryContext",
    "DiscoveryRegistry",
    "DiscoveryService",
    "FeedValidator",
    "RedditDiscoveryService",
    "StandardDiscoveryService",
    "create_discovery_registry",
    "create_feed_validator",
    "discover_feeds",
]
