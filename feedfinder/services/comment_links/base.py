"""Base class for comment-link extractors."""

from abc import ABC, abstractmethod

from feedfinder.models.feed import ExtractedCommentLink, FeedItem


class CommentLinkExtractor(ABC):
    """
    Finds the discussion/comments URL of a feed item.

    Each concrete extractor handles one feed shape or pattern (RSS
    ``<comments>``, Atom reply links, links embedded in HTML). The registry
    runs extractors in ascending ``priority`` order.
    """

    priority: int = 100

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def can_handle(self, item: FeedItem) -> bool:
        """
        Cheap check whether this extractor applies to the item.

        Must not raise. When it returns False, ``extract`` is not called.
        """

    @abstractmethod
    def extract(self, item: FeedItem) -> ExtractedCommentLink | None:
        """
        Extract the comment link from the item.

        Returns:
            The extracted link, or None when the item has none.
        """
