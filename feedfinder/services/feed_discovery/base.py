"""Discovery service contract and per-request context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from feedfinder.models.feed import DiscoveredFeed
from feedfinder.services.telemetry import NullTelemetry, Telemetry

FeedValidator = Callable[[str], Awaitable[DiscoveredFeed | None]]


@dataclass
class DiscoveryContext:
    """State shared by every service during one discovery request.

    Attributes:
        validate_feed: Fetches a candidate URL and returns feed metadata, or None
            when it is not a usable feed.
        telemetry: Span/breadcrumb/exception sink; a no-op by default.
        seen_urls: Normalized feed URLs already returned in this request.
        seen_feed_ids: Atom feed ids already returned in this request.
    """

    validate_feed: FeedValidator
    telemetry: Telemetry = field(default_factory=NullTelemetry)
    seen_urls: set[str] = field(default_factory=set)
    seen_feed_ids: set[str] = field(default_factory=set)


class DiscoveryService(ABC):
    """
    One strategy for finding feeds behind a user-submitted URL.

    Platform services (Apple Podcasts, Reddit) use a low ``priority`` so they
    run before the generic fallback. Returning ``[]`` lets the next service try.
    """

    priority: int = 100

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def can_handle(self, url: str) -> bool:
        """Return True if this service applies to ``url``. Must not raise."""

    @abstractmethod
    async def discover(self, url: str, context: DiscoveryContext) -> list[DiscoveredFeed]:
        """
        Discover feeds for ``url``.

        Implementations catch their own errors and return ``[]`` instead of
        raising; the worst outcome is "no feed found".
        """
