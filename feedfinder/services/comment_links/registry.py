from collections.abc import Sequence

from feedfinder.core.logging import get_logger
from feedfinder.models.feed import FeedItem
from feedfinder.services.comment_links.base import CommentLinkExtractor

logger = get_logger(__name__)


class CommentLinkRegistry:
    """Registry running comment-link extractors in priority order."""

    def __init__(self, extractors: Sequence[CommentLinkExtractor] = ()):
        self._extractors: list[CommentLinkExtractor] = []
        for extractor in extractors:
            self.register(extractor)

    def register(self, extractor: CommentLinkExtractor) -> None:
        """Register an extractor. Lower priority runs first; ties keep registration order."""
        self._extractors.append(extractor)
        self._extractors.sort(key=lambda registered: registered.priority)
        logger.debug(
            f"Registered comment link extractor: {extractor.name} (priority {extractor.priority})"
        )

    @property
    def extractors(self) -> tuple[CommentLinkExtractor, ...]:
        return tuple(self._extractors)

    def extract(self, item: FeedItem) -> str | None:
        """
        Return the comment link of a feed item.

        The first extractor that can handle the item and returns a non-empty
        URL wins. An extractor that raises is logged and skipped.

        Args:
            item: Feed item to extract from

        Returns:
            Comment link URL, or None when no extractor found one
        """
        for extractor in self._extractors:
            try:
                if not extractor.can_handle(item):
                    continue
                result = extractor.extract(item)
            except Exception as e:  # noqa: BLE001
                logger.warning(
                    "Comment link extractor %s failed: %s",
                    extractor.name,
                    e,
                    exc_info=True,
                    extra={
                        "component": "comment_links",
                        "operation": "extract_comment_link",
                        "context_data": {
                            "extractor": extractor.name,
                            "item_link": item.link,
                        },
                    },
                )
                continue

            if result is not None and result.url:
                return result.url

        return None
