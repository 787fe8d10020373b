from feedfinder.models.feed import ExtractedCommentLink, FeedItem
from feedfinder.services.comment_links.base import CommentLinkExtractor

COMMENT_LINK_RELS = frozenset({"replies", "comments", "discussion"})


class AtomLinkExtractor(CommentLinkExtractor):
    """Reads Atom ``<link rel="replies">`` style links."""

    priority = 20

    def can_handle(self, item: FeedItem) -> bool:
        return bool(item.links)

    def extract(self, item: FeedItem) -> ExtractedCommentLink | None:
        for link in item.links:
            rel = (link.rel or "").lower()
            if rel in COMMENT_LINK_RELS and link.href:
                return ExtractedCommentLink(url=link.href, source="atom-link")
        return None
