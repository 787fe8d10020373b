from __future__ import annotations

from collections.abc import Callable, Sequence

from feedfinder.core.logging import get_logger
from feedfinder.models.feed import DiscoveredFeed
from feedfinder.services.feed_discovery.base import (
    DiscoveryContext,
    DiscoveryService,
    FeedValidator,
)
from feedfinder.services.feed_discovery.validator import create_feed_validator
from feedfinder.services.http import HttpService
from feedfinder.services.telemetry import NullTelemetry, Telemetry

logger = get_logger(__name__)

ValidatorFactory = Callable[[set[str], set[str]], FeedValidator]


class DiscoveryRegistry:
    """Registry running discovery services in priority order.

    The first service returning a non-empty list ends the search; later
    services are not consulted. A service that raises is reported and skipped.
    """

    def __init__(
        self,
        services: Sequence[DiscoveryService] = (),
        *,
        telemetry: Telemetry | None = None,
        http_service: HttpService | None = None,
        validator_factory: ValidatorFactory | None = None,
    ):
        self._services: list[DiscoveryService] = []
        self.telemetry: Telemetry = telemetry or NullTelemetry()
        self._validator_factory = validator_factory or (
            lambda seen_urls, seen_feed_ids: create_feed_validator(
                seen_urls, seen_feed_ids, http_service=http_service
            )
        )
        for service in services:
            self.register(service)

    def register(self, service: DiscoveryService) -> None:
        """Register a service. Lower priority runs first; ties keep registration order."""
        self._services.append(service)
        self._services.sort(key=lambda registered: registered.priority)
        logger.debug(f"Registered discovery service: {service.name} (priority {service.priority})")

    @property
    def services(self) -> tuple[DiscoveryService, ...]:
        return tuple(self._services)

    def create_context(self) -> DiscoveryContext:
        """Fresh context with its own dedup sets for one discovery request."""
        seen_urls: set[str] = set()
        seen_feed_ids: set[str] = set()
        return DiscoveryContext(
            validate_feed=self._validator_factory(seen_urls, seen_feed_ids),
            telemetry=self.telemetry,
            seen_urls=seen_urls,
            seen_feed_ids=seen_feed_ids,
        )

    async def discover(self, url: str) -> list[DiscoveredFeed]:
        """
        Discover feeds for a URL.

        Args:
            url: User-submitted URL (site, podcast page, or feed)

        Returns:
            Feeds found by the first service that found any, or an empty list
        """
        telemetry = self.telemetry
        with telemetry.start_span(
            "feed.discovery",
            "Feed Discovery",
            {"url": url, "service_count": len(self._services)},
        ) as span:
            context = self.create_context()
            telemetry.add_breadcrumb(
                "feed.discovery",
                f"Starting feed discovery for {url}",
                "info",
                {"url": url, "service_count": len(self._services)},
            )

            for service in self._services:
                try:
                    if not service.can_handle(url):
                        telemetry.add_breadcrumb(
                            "feed.discovery",
                            f"Service {service.name} cannot handle URL",
                            "debug",
                            {"service": service.name, "url": url},
                        )
                        continue

                    telemetry.add_breadcrumb(
                        "feed.discovery",
                        f"Trying service {service.name}",
                        "info",
                        {"service": service.name, "priority": service.priority},
                    )
                    feeds = await service.discover(url, context)
                except Exception as e:  # noqa: BLE001
                    span.set_attribute(f"service_{service.name}_failed", True)
                    logger.warning(
                        "Discovery service %s failed: %s",
                        service.name,
                        e,
                        extra={
                            "component": "feed_discovery",
                            "operation": "feed_discovery_service",
                            "context_data": {"service": service.name, "url": url},
                        },
                    )
                    telemetry.capture_exception(
                        e,
                        "warning",
                        {"service": service.name, "operation": "feed_discovery_service"},
                        {"url": url, "service_priority": service.priority},
                    )
                    continue

                if feeds:
                    span.set_attribute("service_used", service.name)
                    span.set_attribute("feeds_found", len(feeds))
                    span.set_status("ok")
                    telemetry.add_breadcrumb(
                        "feed.discovery",
                        f"Service {service.name} found {len(feeds)} feed(s)",
                        "info",
                        {
                            "service": service.name,
                            "feeds_found": len(feeds),
                            "feed_urls": [feed.url for feed in feeds],
                        },
                    )
                    return list(feeds)

            span.set_attribute("feeds_found", 0)
            span.set_status("error", "No feeds found")
            logger.info(
                "No feeds found for %s",
                url,
                extra={
                    "component": "feed_discovery",
                    "operation": "feed_discovery",
                    "context_data": {
                        "url": url,
                        "services_tried": [service.name for service in self._services],
                    },
                },
            )
            return []
