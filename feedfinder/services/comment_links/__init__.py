"""Comment link extraction for feed items."""

from feedfinder.models.feed import ExtractedCommentLink, FeedItem
from feedfinder.services.comment_links.atom_link import AtomLinkExtractor
from feedfinder.services.comment_links.base import CommentLinkExtractor
from feedfinder.services.comment_links.html_pattern import HtmlPatternExtractor
from feedfinder.services.comment_links.registry import CommentLinkRegistry
from feedfinder.services.comment_links.rss_element import RssElementExtractor


def create_comment_link_registry() -> CommentLinkRegistry:
    """Build a registry with the default extractors."""
    return CommentLinkRegistry(
        [RssElementExtractor(), AtomLinkExtractor(), HtmlPatternExtractor()]
    )


def extract_comment_link(item: FeedItem, registry: CommentLinkRegistry | None = None) -> str | None:
    """Extract the comment link of ``item`` with ``registry`` or a default one."""
    return (registry or create_comment_link_registry()).extract(item)


__all__ = [
    "AtomLinkExtractor",
    "CommentLinkExtractor",
    "CommentLinkRegistry",
    "ExtractedCommentLink",
    "HtmlPatternExtractor",
    "RssElementExtractor",
    "create_comment_link_registry",
    "extract_comment_link",
]
