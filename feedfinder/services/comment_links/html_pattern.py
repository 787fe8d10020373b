"""
Finds comment links embedded in an item's HTML body.

Reddit puts ``<a href="...">[comments]</a>`` in the description and several
aggregators append a plain "Comments" or "Discussion" anchor. Only English
link text and the common speech-balloon emoji are recognised; feeds in other
languages need their own extractor.
"""

import re

from feedfinder.models.feed import ExtractedCommentLink, FeedItem
from feedfinder.services.comment_links.base import CommentLinkExtractor

_ANCHOR_OPEN = r"<a\s+(?:[^>]*?\s+)?href=[\"']([^\"']+)[\"'][^>]*?>"

COMMENT_LINK_PATTERNS = (
    # [comments] (Reddit)
    re.compile(_ANCHOR_OPEN + r"\s*\[?\s*comments?\s*\]?\s*</a>", re.IGNORECASE),
    # plain "Comments" / "Discussion"
    re.compile(_ANCHOR_OPEN + r"\s*(?:comments?|discussion|discuss)\s*</a>", re.IGNORECASE),
    # icon or leading text followed by a comment word
    re.compile(_ANCHOR_OPEN + r"[^<]*(?:\U0001F4AC|\U0001F5E8\ufe0f?|comment|discussion)", re.IGNORECASE),
)


class HtmlPatternExtractor(CommentLinkExtractor):
    priority = 30

    def can_handle(self, item: FeedItem) -> bool:
        return bool(item.description or item.content or item.summary)

    def extract(self, item: FeedItem) -> ExtractedCommentLink | None:
        for html in (item.description, item.content, item.summary):
            if not html or not isinstance(html, str):
                continue
            for pattern in COMMENT_LINK_PATTERNS:
                match = pattern.search(html)
                if match and match.group(1):
                    return ExtractedCommentLink(url=match.group(1), source="html-pattern")
        return None
