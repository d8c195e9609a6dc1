"""
Unit tests for the periodic flush timer.
"""

import threading
import time

import pytest

from aws_toolkit.utils import FlushTimer


class TestFlushTimer:
    """Test cases for FlushTimer."""

    def test_rejects_non_positive_interval(self):
        """Test interval validation."""
        with pytest.raises(ValueError):
            FlushTimer(lambda: None, 0)

    def test_ticks_periodically(self):
        """Test that the callback runs on every tick."""
        ticks = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) >= 2:
                ticks.set()

        timer = FlushTimer(callback, 0.01)
        timer.start()
        try:
            assert ticks.wait(2.0)
        finally:
            timer.stop()

        assert not timer.is_running

    def test_stop_prevents_further_ticks(self):
        """Test that no tick happens after stop."""
        calls = []
        timer = FlushTimer(lambda: calls.append(1), 0.01)
        timer.start()
        timer.stop()

        count = len(calls)
        time.sleep(0.05)

        assert len(calls) == count

    def test_skips_while_flush_in_flight(self):
        """Test that a non-blocking flush is skipped while another runs."""
        started = threading.Event()
        release = threading.Event()

        def slow_callback():
            started.set()
            release.wait(2.0)

        timer = FlushTimer(slow_callback, 60)
        worker = threading.Thread(target=timer.flush)
        worker.start()
        try:
            assert started.wait(2.0)
            assert timer.flush(blocking=False) is False
        finally:
            release.set()
            worker.join(2.0)

        assert timer.flush(blocking=False) is True

    def test_callback_errors_are_swallowed(self):
        """Test that a failing callback does not raise."""
        def failing_callback():
            raise RuntimeError("boom")

        timer = FlushTimer(failing_callback, 60)

        assert timer.flush() is True
