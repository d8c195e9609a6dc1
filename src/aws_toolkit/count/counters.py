"""
Performance counters.

CachedCounters keeps counter values in memory and hands them to ``save`` in
batches. Concrete sinks such as CloudWatchCounters implement ``save``.
"""

import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from aws_toolkit.config.config_params import ConfigParams


class CounterType(str, Enum):
    """Kinds of measurements a counter collects."""

    INTERVAL = 'interval'
    LAST_VALUE = 'last_value'
    STATISTICS = 'statistics'
    TIMESTAMP = 'timestamp'
    INCREMENT = 'increment'


class Counter(BaseModel):
    """Current state of one counter."""

    name: str
    type: CounterType
    last: Optional[float] = None
    count: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    average: Optional[float] = None
    time: Optional[datetime] = None


class Timing:
    """Measures elapsed time between creation and ``end_timing``."""

    def __init__(self, counter: Optional[str] = None, callback: Optional["Counters"] = None):
        self._counter = counter
        self._callback = callback
        self._start = time.perf_counter()

    def end_timing(self) -> float:
        """Stop the measurement and report it; returns elapsed milliseconds."""
        elapsed = (time.perf_counter() - self._start) * 1000.0
        if self._callback is not None and self._counter is not None:
            self._callback.end_timing(self._counter, elapsed)
        return elapsed

    def __enter__(self) -> "Timing":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.end_timing()
        return False


@runtime_checkable
class Counters(Protocol):
    """Protocol for components that collect performance counters."""

    def begin_timing(self, name: str) -> Timing:
        ...

    def end_timing(self, name: str, elapsed: float) -> None:
        ...

    def stats(self, name: str, value: float) -> None:
        ...

    def last(self, name: str, value: float) -> None:
        ...

    def timestamp_now(self, name: str) -> None:
        ...

    def timestamp(self, name: str, value: datetime) -> None:
        ...

    def increment_one(self, name: str) -> None:
        ...

    def increment(self, name: str, value: int) -> None:
        ...


class NullCounters:
    """Counters that discard every measurement."""

    def begin_timing(self, name: str) -> Timing:
        return Timing()

    def end_timing(self, name: str, elapsed: float) -> None:
        pass

    def stats(self, name: str, value: float) -> None:
        pass

    def last(self, name: str, value: float) -> None:
        pass

    def timestamp_now(self, name: str) -> None:
        pass

    def timestamp(self, name: str, value: datetime) -> None:
        pass

    def increment_one(self, name: str) -> None:
        pass

    def increment(self, name: str, value: int) -> None:
        pass


class CachedCounters(ABC):
    """
    Abstract counters that cache measurements in memory.

    Configuration parameters:
        options.interval:      interval in milliseconds between saves (default: 5 mins)
        options.reset_timeout: timeout in milliseconds to reset the counters, 0 disables it (default: 0)
    """

    def __init__(self):
        self._cache: Dict[str, Counter] = {}
        self._updated = False
        self._last_dump_time = time.time()
        self._last_reset_time = time.time()
        self._interval = 300000
        self._reset_timeout = 0
        self._lock = threading.RLock()

    @property
    def interval(self) -> int:
        return self._interval

    def configure(self, config: ConfigParams) -> None:
        self._interval = config.get_as_integer_with_default('options.interval', self._interval)
        self._reset_timeout = config.get_as_integer_with_default('options.reset_timeout', self._reset_timeout)

    @abstractmethod
    def save(self, counters: List[Counter]) -> None:
        """Save the current counter measurements."""

    def clear(self, name: str) -> None:
        with self._lock:
            self._cache.pop(name, None)

    def clear_all(self) -> None:
        with self._lock:
            self._cache = {}
            self._updated = False

    def dump(self) -> None:
        """Save all counters if anything changed since the last save."""
        with self._lock:
            if not self._updated:
                return
            counters = [counter.model_copy() for counter in self._cache.values()]
            self._updated = False
            self._last_dump_time = time.time()

        self.save(counters)

    def _update(self) -> None:
        self._updated = True

    def _reset_if_needed(self) -> None:
        if self._reset_timeout <= 0:
            return
        now = time.time()
        if (now - self._last_reset_time) * 1000 > self._reset_timeout:
            self._cache = {}
            self._updated = False
            self._last_reset_time = now

    def get_all(self) -> List[Counter]:
        with self._lock:
            self._reset_if_needed()
            return list(self._cache.values())

    def get(self, name: str, type: CounterType) -> Counter:
        """
        Get a counter by name, creating it when missing.

        Args:
            name: Counter name
            type: Counter type, used when the counter is created

        Returns:
            Existing or new counter
        """
        if not name:
            raise ValueError("Counter name cannot be empty")

        with self._lock:
            self._reset_if_needed()

            counter = self._cache.get(name)
            if counter is None or counter.type != type:
                counter = Counter(name=name, type=type)
                self._cache[name] = counter

            return counter

    @staticmethod
    def _calculate_stats(counter: Counter, value: float) -> None:
        counter.last = value
        counter.count = (counter.count or 0) + 1
        counter.max = value if counter.max is None else max(counter.max, value)
        counter.min = value if counter.min is None else min(counter.min, value)
        if counter.average is None or counter.count == 1:
            counter.average = value
        else:
            counter.average = (counter.average * (counter.count - 1) + value) / counter.count

    def begin_timing(self, name: str) -> Timing:
        return Timing(name, self)

    def end_timing(self, name: str, elapsed: float) -> None:
        with self._lock:
            counter = self.get(name, CounterType.INTERVAL)
            self._calculate_stats(counter, elapsed)
            counter.time = datetime.now(timezone.utc)
            self._update()

    def stats(self, name: str, value: float) -> None:
        with self._lock:
            counter = self.get(name, CounterType.STATISTICS)
            self._calculate_stats(counter, value)
            counter.time = datetime.now(timezone.utc)
            self._update()

    def last(self, name: str, value: float) -> None:
        with self._lock:
            counter = self.get(name, CounterType.LAST_VALUE)
            counter.last = value
            counter.time = datetime.now(timezone.utc)
            self._update()

    def timestamp_now(self, name: str) -> None:
        self.timestamp(name, datetime.now(timezone.utc))

    def timestamp(self, name: str, value: datetime) -> None:
        with self._lock:
            counter = self.get(name, CounterType.TIMESTAMP)
            counter.time = value
            self._update()

    def increment_one(self, name: str) -> None:
        self.increment(name, 1)

    def increment(self, name: str, value: int) -> None:
        with self._lock:
            counter = self.get(name, CounterType.INCREMENT)
            counter.count = (counter.count or 0) + value
            counter.time = datetime.now(timezone.utc)
            self._update()
