"""Pydantic models shared by feed discovery and comment-link extraction."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

FeedType = Literal["rss", "atom", "rdf", "json"]
CommentLinkSource = Literal["rss-comments-element", "atom-link", "html-pattern", "url-pattern"]


class DiscoveredFeed(BaseModel):
    """A validated feed found during discovery."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    description: str | None = None
    type: FeedType = "rss"
    icon_url: str | None = None


class ExtractedCommentLink(BaseModel):
    """Discussion URL found for a feed item and the extractor that found it."""

    model_config = ConfigDict(frozen=True)

    url: str
    source: CommentLinkSource


class FeedLink(BaseModel):
    """A link element attached to a feed item (Atom ``<link>``, JSON Feed url)."""

    model_config = ConfigDict(extra="allow")

    href: str | None = None
    rel: str | None = None
    type: str | None = None


class FeedItem(BaseModel):
    """One entry of a parsed RSS, Atom, RDF or JSON feed.

    Every field is optional because feed formats disagree on what an entry
    carries. Format-specific fields not modelled here are kept as extras.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    link: str | None = None
    description: str | None = None
    summary: str | None = None
    content: str | None = None
    comments: str | None = None
    links: list[FeedLink] = Field(default_factory=list)
    published: str | None = None

    @classmethod
    def from_entry(cls, entry: Mapping[str, Any]) -> FeedItem:
        """Build a FeedItem from a feedparser entry.

        Args:
            entry: A ``feedparser`` entry (any mapping works).

        Returns:
            FeedItem with the common fields populated.
        """
        content = entry.get("content")
        content_value = None
        if isinstance(content, list) and content:
            first = content[0]
            content_value = first.get("value") if isinstance(first, Mapping) else str(first)
        elif isinstance(content, str):
            content_value = content

        links = [
            FeedLink(href=link.get("href"), rel=link.get("rel"), type=link.get("type"))
            for link in entry.get("links") or []
            if isinstance(link, Mapping)
        ]

        return cls(
            title=_string_or_none(entry.get("title")),
            link=_string_or_none(entry.get("link")),
            description=_string_or_none(entry.get("description")),
            summary=_string_or_none(entry.get("summary")),
            content=content_value,
            comments=_string_or_none(entry.get("comments")),
            links=links,
            published=_string_or_none(entry.get("published") or entry.get("updated")),
        )


def _string_or_none(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)
