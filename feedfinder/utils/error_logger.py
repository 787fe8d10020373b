"""
Structured error logging helpers.

Errors logged here flow through the JSONL error handler configured in
feedfinder/core/logging.py, so every record carries component, operation and
context data.

Usage:
    from feedfinder.utils.error_logger import log_error, log_http_error

    log_error("feed_discovery", error, operation="apple_lookup", context={"url": url})
    log_http_error("http_service", url="https://...", error=e, response=resp)
"""

import logging
from typing import Any

from feedfinder.core.logging import get_logger


def _extract_http_details(response: Any) -> dict[str, Any]:
    """Pull loggable details off an HTTP response object."""
    details: dict[str, Any] = {}

    try:
        if hasattr(response, "status_code"):
            details["status_code"] = response.status_code
        if hasattr(response, "url"):
            details["url"] = str(response.url)
        if hasattr(response, "headers"):
            details["content_type"] = response.headers.get("content-type")
        if hasattr(response, "text"):
            details["response_body"] = response.text[:500]
    except Exception as e:  # noqa: BLE001
        details["extraction_error"] = f"Failed to extract HTTP details: {e}"

    return details


def log_error(
    component: str,
    error: Exception,
    *,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
    http_response: Any | None = None,
    level: str = "error",
) -> None:
    """Log an exception with full context.

    Args:
        component: Component name identifying the source of the error.
        error: The exception that occurred.
        operation: Name of the operation that failed.
        context: Additional context data.
        http_response: HTTP response object, when there is one.
        level: Log level name; warnings are logged without a stack trace.
    """
    logger = get_logger(f"error.{component}")

    operation_str = f" during {operation}" if operation else ""
    message = f"{component} error{operation_str}: {error}"
    extra = {
        "component": component,
        "operation": operation,
        "context_data": context,
        "http_details": _extract_http_details(http_response) if http_response else None,
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if level == "error":
        logger.error(message, exc_info=error, extra=extra)
    else:
        logger.log(_level_number(level), message, extra=extra)


def log_http_error(
    component: str,
    url: str,
    *,
    response: Any | None = None,
    error: Exception | None = None,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP failure with request and response details."""
    http_context = {"url": url, **(context or {})}
    if error is None:
        status = getattr(response, "status_code", "unknown")
        error = RuntimeError(f"HTTP {status} for {url}")

    log_error(
        component,
        error,
        operation=operation or "http_request",
        context=http_context,
        http_response=response,
        level="warning",
    )


def _level_number(level: str) -> int:
    return getattr(logging, level.upper(), logging.WARNING)
