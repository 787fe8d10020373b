"""Tests for Reddit feed discovery."""

from unittest.mock import AsyncMock

import pytest

from feedfinder.models.feed import DiscoveredFeed
from feedfinder.services.feed_discovery.base import DiscoveryContext
from feedfinder.services.feed_discovery.reddit import RedditDiscoveryService
from feedfinder.services.http import HttpFetchError


class FakeHttpService:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.requests = []

    async def fetch_json(self, url, params=None, headers=None, timeout=None):
        self.requests.append((url, timeout))
        if self.error:
            raise self.error
        return self.payload


def _validated(url):
    return DiscoveredFeed(url=url, title="r/python", type="atom")


def _context(feed_url, valid=True):
    validate_feed = AsyncMock(return_value=_validated(feed_url) if valid else None)
    return DiscoveryContext(validate_feed=validate_feed)


def test_can_handle_reddit_hosts():
    service = RedditDiscoveryService(http_service=FakeHttpService())

    assert service.can_handle("https://www.reddit.com/r/python") is True
    assert service.can_handle("https://old.reddit.com/user/spez") is True
    assert service.can_handle("https://example.com/r/python") is False
    assert service.can_handle("garbage") is False


@pytest.mark.asyncio
async def test_subreddit_feed_with_icon():
    http = FakeHttpService(
        payload={
            "data": {
                "community_icon": "https://styles.redditmedia.com/icon.png?width=256&amp;s=abc",
                "icon_img": "https://b.thumbs.redditmedia.com/legacy.png",
            }
        }
    )
    context = _context("https://www.reddit.com/r/python/.rss")

    feeds = await RedditDiscoveryService(http_service=http).discover(
        "https://www.reddit.com/r/python/top/?t=week", context
    )

    context.validate_feed.assert_awaited_once_with("https://www.reddit.com/r/python/.rss")
    assert http.requests == [("https://www.reddit.com/r/python/about.json", 5.0)]
    assert len(feeds) == 1
    assert feeds[0].icon_url == "https://styles.redditmedia.com/icon.png"
    assert feeds[0].title == "r/python"


@pytest.mark.asyncio
async def test_subreddit_icon_falls_back_to_icon_img():
    http = FakeHttpService(
        payload={"data": {"community_icon": "", "icon_img": "https://b.example.com/i.png"}}
    )

    feeds = await RedditDiscoveryService(http_service=http).discover(
        "https://www.reddit.com/r/python", _context("https://www.reddit.com/r/python/.rss")
    )

    assert feeds[0].icon_url == "https://b.example.com/i.png"


@pytest.mark.asyncio
async def test_icon_failure_still_returns_feed():
    http = FakeHttpService(error=HttpFetchError("https://www.reddit.com", "timed out"))

    feeds = await RedditDiscoveryService(http_service=http).discover(
        "https://www.reddit.com/r/python", _context("https://www.reddit.com/r/python/.rss")
    )

    assert len(feeds) == 1
    assert feeds[0].icon_url is None


@pytest.mark.asyncio
async def test_user_feed_skips_icon_lookup():
    http = FakeHttpService(payload={})
    context = _context("https://old.reddit.com/user/some_user/.rss")

    feeds = await RedditDiscoveryService(http_service=http).discover(
        "https://old.reddit.com/user/some_user/submitted", context
    )

    context.validate_feed.assert_awaited_once_with("https://old.reddit.com/user/some_user/.rss")
    assert http.requests == []
    assert len(feeds) == 1


@pytest.mark.asyncio
async def test_front_page_returns_empty():
    context = _context("unused")

    feeds = await RedditDiscoveryService(http_service=FakeHttpService()).discover(
        "https://www.reddit.com/", context
    )

    assert feeds == []
    context.validate_feed.assert_not_awaited()


@pytest.mark.asyncio
async def test_validation_failure_returns_empty():
    feeds = await RedditDiscoveryService(http_service=FakeHttpService(payload={})).discover(
        "https://www.reddit.com/r/python",
        _context("https://www.reddit.com/r/python/.rss", valid=False),
    )

    assert feeds == []
