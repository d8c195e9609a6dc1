"""Performance counters and the CloudWatch Metrics sink."""

from aws_toolkit.count.cloudwatch_counters import CloudWatchCounters
from aws_toolkit.count.cloudwatch_unit import CloudWatchUnit
from aws_toolkit.count.counters import (
    CachedCounters,
    Counter,
    Counters,
    CounterType,
    NullCounters,
    Timing,
)

__all__ = [
    "CachedCounters",
    "CloudWatchCounters",
    "CloudWatchUnit",
    "Counter",
    "CounterType",
    "Counters",
    "NullCounters",
    "Timing",
]
