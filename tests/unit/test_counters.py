"""
Unit tests for cached performance counters.
"""

from datetime import datetime, timezone
from typing import List

import pytest

from aws_toolkit.config import ConfigParams
from aws_toolkit.count import CachedCounters, Counter, CounterType, NullCounters


class RecordingCounters(CachedCounters):
    """Counters that record every save."""

    def __init__(self):
        super().__init__()
        self.saved: List[List[Counter]] = []

    def save(self, counters: List[Counter]) -> None:
        self.saved.append(counters)


@pytest.fixture
def counters() -> RecordingCounters:
    return RecordingCounters()


class TestCachedCounters:
    """Test cases for CachedCounters."""

    def test_increment(self, counters):
        """Test increment counters."""
        counters.increment_one("calls")
        counters.increment("calls", 4)

        counter = counters.get("calls", CounterType.INCREMENT)
        assert counter.count == 5
        assert counter.time is not None

    def test_stats(self, counters):
        """Test statistics counters."""
        for value in (1.0, 2.0, 6.0):
            counters.stats("latency", value)

        counter = counters.get("latency", CounterType.STATISTICS)
        assert counter.count == 3
        assert counter.min == 1.0
        assert counter.max == 6.0
        assert counter.average == pytest.approx(3.0)
        assert counter.last == 6.0

    def test_last(self, counters):
        """Test last value counters."""
        counters.last("queue", 10)
        counters.last("queue", 3)

        assert counters.get("queue", CounterType.LAST_VALUE).last == 3

    def test_timestamp(self, counters):
        """Test timestamp counters."""
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        counters.timestamp("started", moment)
        counters.timestamp_now("finished")

        assert counters.get("started", CounterType.TIMESTAMP).time == moment
        assert counters.get("finished", CounterType.TIMESTAMP).time is not None

    def test_timing(self, counters):
        """Test interval counters through Timing."""
        timing = counters.begin_timing("dummy.exec_time")
        elapsed = timing.end_timing()

        counter = counters.get("dummy.exec_time", CounterType.INTERVAL)
        assert counter.count == 1
        assert counter.last == pytest.approx(elapsed)

    def test_timing_context_manager(self, counters):
        """Test Timing as a context manager."""
        with counters.begin_timing("dummy.exec_time"):
            pass

        assert counters.get("dummy.exec_time", CounterType.INTERVAL).count == 1

    def test_type_change_replaces_counter(self, counters):
        """Test that requesting another type recreates the counter."""
        counters.increment("metric", 2)
        counters.last("metric", 7)

        counter = counters.get("metric", CounterType.LAST_VALUE)
        assert counter.count is None
        assert counter.last == 7

    def test_empty_name_rejected(self, counters):
        """Test that counters need a name."""
        with pytest.raises(ValueError):
            counters.get("", CounterType.INCREMENT)

    def test_dump_saves_snapshot_once(self, counters):
        """Test that dump saves only when counters changed."""
        counters.increment_one("calls")

        counters.dump()
        counters.dump()

        assert len(counters.saved) == 1
        assert [c.name for c in counters.saved[0]] == ["calls"]

        counters.increment_one("calls")
        assert counters.saved[0][0].count == 1

    def test_clear_all(self, counters):
        """Test clearing counters."""
        counters.increment_one("calls")
        counters.clear_all()

        assert counters.get_all() == []
        counters.dump()
        assert counters.saved == []

    def test_reset_timeout(self, counters, monkeypatch):
        """Test that counters are reset after the reset timeout."""
        counters.configure(ConfigParams.from_tuples("options.reset_timeout", 1000))
        counters.increment_one("calls")

        now = counters._last_reset_time + 2
        monkeypatch.setattr("aws_toolkit.count.counters.time.time", lambda: now)

        assert counters.get_all() == []

    def test_configure_interval(self, counters):
        """Test configuring the save interval."""
        counters.configure(ConfigParams.from_tuples("options.interval", 1000))

        assert counters.interval == 1000


class TestNullCounters:
    """Test cases for NullCounters."""

    def test_discards_everything(self):
        """Test that null counters accept all calls."""
        counters = NullCounters()
        counters.increment("calls", 1)
        counters.stats("latency", 1.0)

        timing = counters.begin_timing("dummy")
        assert timing.end_timing() >= 0
