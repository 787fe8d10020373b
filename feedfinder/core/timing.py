"""Timing utilities for discovery and HTTP calls."""

import time
from collections.abc import Generator
from contextlib import contextmanager

from feedfinder.core.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def timed(operation: str, *, component: str | None = None) -> Generator[None]:
    """Context manager logging how long an operation took.

    Args:
        operation: Description of the operation being timed.
        component: Optional component name attached to the log record.

    Usage:
        with timed("apple lookup", component="feed_discovery"):
            response = await http.fetch(url)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        extra = {
            "component": component,
            "operation": operation,
            "context_data": {"duration_ms": round(duration_ms, 2)},
        }
        if duration_ms < 1000:
            logger.debug(f"[{duration_ms:.2f}ms] {operation}", extra=extra)
        elif duration_ms < 5000:
            logger.info(f"[{duration_ms:.2f}ms] {operation} (slow)", extra=extra)
        else:
            logger.warning(f"[{duration_ms:.2f}ms] {operation} (very slow)", extra=extra)
