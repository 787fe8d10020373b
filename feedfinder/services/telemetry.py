"""Telemetry sink used by feed discovery.

Discovery code talks to a ``Telemetry`` object for spans, breadcrumbs and
captured exceptions. ``NullTelemetry`` is the default so call sites never need
to check whether telemetry is configured; ``LoggingTelemetry`` sends everything
through the structured logging stack.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal, Protocol

from feedfinder.core.logging import get_logger
from feedfinder.utils.error_logger import log_error

logger = get_logger(__name__)

TelemetryLevel = Literal["debug", "info", "warning", "error"]
SpanStatus = Literal["ok", "error"]

_LOG_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


class Span(Protocol):
    def set_attribute(self, key: str, value: Any) -> None: ...

    def set_status(self, status: SpanStatus, message: str | None = None) -> None: ...


class Telemetry(Protocol):
    def start_span(
        self, op: str, name: str, attributes: dict[str, Any] | None = None
    ) -> Any: ...

    def add_breadcrumb(
        self,
        category: str,
        message: str,
        level: TelemetryLevel = "info",
        data: dict[str, Any] | None = None,
    ) -> None: ...

    def capture_exception(
        self,
        error: BaseException,
        level: TelemetryLevel = "error",
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None: ...


class NullSpan:
    def set_attribute(self, key: str, value: Any) -> None:
        return None

    def set_status(self, status: SpanStatus, message: str | None = None) -> None:
        return None


class NullTelemetry:
    """Telemetry that records nothing."""

    @contextmanager
    def start_span(
        self, op: str, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[NullSpan]:
        yield NullSpan()

    def add_breadcrumb(
        self,
        category: str,
        message: str,
        level: TelemetryLevel = "info",
        data: dict[str, Any] | None = None,
    ) -> None:
        return None

    def capture_exception(
        self,
        error: BaseException,
        level: TelemetryLevel = "error",
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        return None


class RecordedSpan:
    """Span that keeps its attributes and status for the final log record."""

    def __init__(self, op: str, name: str, attributes: dict[str, Any] | None = None):
        self.op = op
        self.name = name
        self.attributes: dict[str, Any] = dict(attributes or {})
        self.status: SpanStatus | None = None
        self.status_message: str | None = None

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def set_status(self, status: SpanStatus, message: str | None = None) -> None:
        self.status = status
        self.status_message = message


class LoggingTelemetry:
    """Telemetry backed by structured log records.

    Spans are logged once on exit with their duration, attributes and status.
    Breadcrumbs become debug/info records and captured exceptions go through
    ``log_error`` so they reach the JSONL error log.
    """

    def __init__(self, component: str = "feed_discovery"):
        self.component = component

    @contextmanager
    def start_span(
        self, op: str, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[RecordedSpan]:
        span = RecordedSpan(op, name, attributes)
        start = time.perf_counter()
        try:
            yield span
        except BaseException:
            span.set_status("error", "exception")
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "Span %s finished in %.2fms (%s)",
                name,
                duration_ms,
                span.status or "unset",
                extra={
                    "component": self.component,
                    "operation": op,
                    "context_data": {
                        **span.attributes,
                        "duration_ms": round(duration_ms, 2),
                        "status": span.status,
                        "status_message": span.status_message,
                    },
                },
            )

    def add_breadcrumb(
        self,
        category: str,
        message: str,
        level: TelemetryLevel = "info",
        data: dict[str, Any] | None = None,
    ) -> None:
        logger.log(
            _LOG_LEVELS.get(level, 20),
            message,
            extra={
                "component": self.component,
                "operation": category,
                "context_data": data,
            },
        )

    def capture_exception(
        self,
        error: BaseException,
        level: TelemetryLevel = "error",
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        operation = (tags or {}).get("operation")
        context = {**(tags or {}), **(extra or {})}
        if isinstance(error, Exception):
            log_error(self.component, error, operation=operation, context=context, level=level)
        else:
            logger.log(
                _LOG_LEVELS.get(level, 40),
                "Captured %s: %s",
                type(error).__name__,
                error,
                extra={"component": self.component, "operation": operation, "context_data": context},
            )
