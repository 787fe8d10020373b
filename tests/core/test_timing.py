import logging
from types import SimpleNamespace

import pytest

from feedfinder.core import timing
from feedfinder.core.timing import timed


def test_timed_logs_fast_operations_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="feedfinder.core.timing"):
        with timed("validate candidates", component="feed_discovery"):
            pass

    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.operation == "validate candidates"
    assert record.component == "feed_discovery"
    assert "duration_ms" in record.context_data


def test_timed_logs_very_slow_operations_as_warning(caplog, monkeypatch):
    ticks = iter([0.0, 6.0])
    monkeypatch.setattr(timing, "time", SimpleNamespace(perf_counter=lambda: next(ticks)))

    with caplog.at_level(logging.DEBUG, logger="feedfinder.core.timing"):
        with timed("itunes lookup"):
            pass

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert "very slow" in record.getMessage()
    assert record.context_data == {"duration_ms": 6000.0}


def test_timed_logs_even_when_the_block_raises(caplog):
    with caplog.at_level(logging.DEBUG, logger="feedfinder.core.timing"):
        with pytest.raises(RuntimeError):
            with timed("failing operation"):
                raise RuntimeError("boom")

    assert caplog.records[-1].operation == "failing operation"
