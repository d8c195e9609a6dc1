"""
Periodic flush timer used by the CloudWatch sinks.

A single daemon thread ticks every ``interval`` seconds and runs the flush
callback. The callback runs under a lock, so a tick that arrives while a
previous flush is still in flight is skipped instead of overlapping it.
"""

import threading
from typing import Callable, Optional

from aws_toolkit.utils.observability import logger


class FlushTimer:
    """Recurring timer with an in-flight guard."""

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float,
        name: str = "flush-timer",
    ):
        """
        Initialize flush timer.

        Args:
            callback: Function to call on every tick
            interval: Seconds between ticks
            name: Thread name, used in log records
        """
        if interval <= 0:
            raise ValueError("Flush interval must be positive")

        self.callback = callback
        self.interval = interval
        self.name = name

        self._lock = threading.Lock()
        self._stop_flag = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread. Calling start twice is a no-op."""
        if self.is_running:
            return

        self._stop_flag.clear()
        self._thread = threading.Thread(target=self._worker, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Prevent further ticks. An in-flight flush is not interrupted."""
        self._stop_flag.set()
        thread = self._thread
        self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def flush(self, blocking: bool = True) -> bool:
        """
        Run the callback under the in-flight guard.

        Args:
            blocking: Wait for a running flush to finish instead of skipping

        Returns:
            True if the callback ran, False if it was skipped
        """
        if not self._lock.acquire(blocking=blocking):
            logger.debug("Flush skipped, previous flush still in flight", extra={"timer": self.name})
            return False

        try:
            self.callback()
        except Exception:
            logger.exception("Flush callback failed", extra={"timer": self.name})
        finally:
            self._lock.release()

        return True

    def _worker(self) -> None:
        """Background worker that flushes periodically."""
        while not self._stop_flag.wait(self.interval):
            self.flush(blocking=False)
