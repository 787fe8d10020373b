"""Tests for telemetry sinks."""

import logging

import pytest

from feedfinder.services.telemetry import LoggingTelemetry, NullTelemetry


def test_null_telemetry_accepts_every_call():
    telemetry = NullTelemetry()

    with telemetry.start_span("feed.discovery", "Feed Discovery", {"url": "x"}) as span:
        span.set_attribute("feeds_found", 0)
        span.set_status("error", "No feeds found")
    telemetry.add_breadcrumb("feed.discovery", "hello", "debug", {"a": 1})
    telemetry.capture_exception(RuntimeError("boom"), "warning", {"operation": "x"}, {})


def test_logging_telemetry_logs_span_on_exit(caplog):
    telemetry = LoggingTelemetry()

    with caplog.at_level(logging.INFO, logger="feedfinder.services.telemetry"):
        with telemetry.start_span(
            "feed.discovery.apple", "Apple Podcast Discovery", {"url": "u"}
        ) as span:
            span.set_attribute("podcast_id", "42")
            span.set_status("ok")

    record = caplog.records[-1]
    assert record.operation == "feed.discovery.apple"
    assert record.component == "feed_discovery"
    assert record.context_data["podcast_id"] == "42"
    assert record.context_data["url"] == "u"
    assert record.context_data["status"] == "ok"
    assert "duration_ms" in record.context_data


def test_logging_telemetry_marks_span_failed_when_block_raises(caplog):
    telemetry = LoggingTelemetry()

    with caplog.at_level(logging.INFO, logger="feedfinder.services.telemetry"):
        with pytest.raises(ValueError):
            with telemetry.start_span("feed.discovery", "Feed Discovery"):
                raise ValueError("bad")

    assert caplog.records[-1].context_data["status"] == "error"


def test_logging_telemetry_breadcrumb_uses_level(caplog):
    telemetry = LoggingTelemetry()

    with caplog.at_level(logging.DEBUG, logger="feedfinder.services.telemetry"):
        telemetry.add_breadcrumb("feed.discovery", "Service skipped", "debug", {"service": "x"})

    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.getMessage() == "Service skipped"
    assert record.context_data == {"service": "x"}


def test_logging_telemetry_capture_exception_goes_to_error_logger(caplog):
    telemetry = LoggingTelemetry()

    with caplog.at_level(logging.DEBUG, logger="error.feed_discovery"):
        telemetry.capture_exception(
            RuntimeError("lookup failed"),
            "warning",
            {"operation": "apple_discovery_lookup"},
            {"podcast_id": "42"},
        )

    record = caplog.records[-1]
    assert record.name == "error.feed_discovery"
    assert record.levelno == logging.WARNING
    assert record.operation == "apple_discovery_lookup"
    assert record.context_data == {"operation": "apple_discovery_lookup", "podcast_id": "42"}
    assert record.error_type == "RuntimeError"
