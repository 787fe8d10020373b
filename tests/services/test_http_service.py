"""Tests for the async HTTP service."""

import logging

import httpx
import pytest

from feedfinder.services.http import HttpFetchError, HttpService


def _service(handler):
    return HttpService(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_returns_successful_response():
    def handler(request):
        assert request.headers["User-Agent"] == "feedfinder/1.0 (RSS Reader)"
        return httpx.Response(200, text="<rss/>")

    response = await _service(handler).fetch("https://example.com/feed")

    assert response.text == "<rss/>"


@pytest.mark.asyncio
async def test_fetch_follows_redirects():
    def handler(request):
        if request.url.path == "/rss":
            return httpx.Response(301, headers={"Location": "https://example.com/feed"})
        return httpx.Response(200, text="ok")

    response = await _service(handler).fetch("https://example.com/rss")

    assert str(response.url) == "https://example.com/feed"


@pytest.mark.asyncio
async def test_fetch_raises_status_error_for_non_2xx():
    service = _service(lambda request: httpx.Response(404))

    with pytest.raises(httpx.HTTPStatusError):
        await service.fetch("https://example.com/missing")


@pytest.mark.asyncio
async def test_fetch_wraps_network_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(HttpFetchError) as exc_info:
        await _service(handler).fetch("https://example.com/feed")

    assert exc_info.value.url == "https://example.com/feed"


@pytest.mark.asyncio
async def test_fetch_wraps_timeouts():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(HttpFetchError):
        await _service(handler).fetch("https://example.com/feed")


@pytest.mark.asyncio
async def test_fetch_json_sends_params_and_accept_header():
    def handler(request):
        assert request.url.params["id"] == "42"
        assert request.url.params["entity"] == "podcast"
        assert request.headers["Accept"] == "application/json"
        return httpx.Response(200, json={"resultCount": 0, "results": []})

    payload = await _service(handler).fetch_json(
        "https://itunes.apple.com/lookup", params={"id": "42", "entity": "podcast"}
    )

    assert payload == {"resultCount": 0, "results": []}


@pytest.mark.asyncio
async def test_status_error_is_logged_as_warning_by_default(caplog):
    service = _service(lambda request: httpx.Response(404))

    with caplog.at_level(logging.DEBUG):
        with pytest.raises(httpx.HTTPStatusError):
            await service.fetch("https://example.com/missing")

    assert any(record.levelno == logging.WARNING for record in caplog.records)


@pytest.mark.asyncio
async def test_status_error_logging_can_be_quieted(caplog):
    service = _service(lambda request: httpx.Response(404))

    with caplog.at_level(logging.DEBUG):
        with pytest.raises(httpx.HTTPStatusError):
            await service.fetch("https://example.com/missing", log_status_errors=False)

    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]
    assert any("404" in record.getMessage() for record in caplog.records)
