from feedfinder.models.feed import ExtractedCommentLink, FeedItem
from feedfinder.services.comment_links.base import CommentLinkExtractor


class RssElementExtractor(CommentLinkExtractor):
    """Reads the RSS ``<comments>`` element (Hacker News, WordPress)."""

    priority = 10

    def can_handle(self, item: FeedItem) -> bool:
        return isinstance(item.comments, str) and bool(item.comments.strip())

    def extract(self, item: FeedItem) -> ExtractedCommentLink | None:
        if not item.comments or not item.comments.strip():
            return None
        return ExtractedCommentLink(url=item.comments.strip(), source="rss-comments-element")
