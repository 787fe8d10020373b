from contextlib import asynccontextmanager
from typing import Any

import httpx

from feedfinder.core.logging import get_logger
from feedfinder.core.settings import get_settings
from feedfinder.utils.error_logger import log_http_error

logger = get_logger(__name__)

FEED_ACCEPT_HEADER = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"
HTML_ACCEPT_HEADER = "text/html,application/xhtml+xml"


class HttpFetchError(Exception):
    """Raised when a request fails at the network level."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class HttpService:
    """Async HTTP client used by discovery strategies.

    Every request is bounded by a timeout. There is no retry: a failed request
    is a failed attempt and the caller decides what happens next.
    """

    def __init__(
        self,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.timeout_seconds = timeout or settings.http_timeout_seconds
        self.headers = {"User-Agent": settings.http_user_agent}
        if headers:
            self.headers.update(headers)
        self._connect_timeout = min(settings.http_connect_timeout_seconds, self.timeout_seconds)
        self._transport = transport

    def _timeout(self, timeout: float | None) -> httpx.Timeout:
        return httpx.Timeout(
            timeout=timeout or self.timeout_seconds,
            connect=min(self._connect_timeout, timeout or self.timeout_seconds),
        )

    @asynccontextmanager
    async def get_client(self, timeout: float | None = None):
        """Get an async HTTP client with the service defaults."""
        async with httpx.AsyncClient(
            timeout=self._timeout(timeout),
            follow_redirects=True,
            headers=self.headers,
            transport=self._transport,
        ) as client:
            yield client

    async def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        log_status_errors: bool = True,
    ) -> httpx.Response:
        """
        GET a URL.

        Args:
            url: URL to fetch
            headers: Additional headers
            timeout: Per-request timeout in seconds, overriding the default
            log_status_errors: Log non-2xx responses as warnings; when False they
                are logged at debug level only

        Returns:
            httpx.Response with a 2xx status

        Raises:
            httpx.HTTPStatusError: For non-2xx responses.
            HttpFetchError: For timeouts and network errors.
        """
        async with self.get_client(timeout) as client:
            logger.debug(f"Fetching URL: {url}")
            try:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as e:
                if not log_status_errors:
                    logger.debug(
                        "HTTP %s for %s",
                        e.response.status_code,
                        url,
                        extra={
                            "component": "http_service",
                            "operation": "http_fetch",
                            "context_data": {"url": url, "status_code": e.response.status_code},
                        },
                    )
                    raise
                log_http_error(
                    "http_service",
                    url=url,
                    response=e.response,
                    error=e,
                    operation="http_fetch",
                    context={"status_code": e.response.status_code},
                )
                raise

            except httpx.TimeoutException as e:
                log_http_error(
                    "http_service",
                    url=url,
                    error=e,
                    operation="http_fetch",
                    context={"error_type": "timeout"},
                )
                raise HttpFetchError(url, f"Timed out fetching {url}") from e

            except httpx.RequestError as e:
                log_http_error(
                    "http_service",
                    url=url,
                    error=e,
                    operation="http_fetch",
                    context={"error_type": "request_error"},
                )
                raise HttpFetchError(url, f"Request to {url} failed: {e}") from e

    async def fetch_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Fetch a URL and decode its JSON body."""
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        if params:
            url = str(httpx.URL(url, params=params))
        response = await self.fetch(url, headers=request_headers, timeout=timeout)
        return response.json()


_http_service: HttpService | None = None


def get_http_service() -> HttpService:
    """Get the shared HTTP service instance."""
    global _http_service
    if _http_service is None:
        _http_service = HttpService()
    return _http_service
