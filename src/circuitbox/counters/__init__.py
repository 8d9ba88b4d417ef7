from __future__ import annotations

from circuitbox.counters.base import CounterKey, WindowCounter
from circuitbox.counters.factory import counter_for
from circuitbox.counters.fixed import FixedWindowCounter
from circuitbox.counters.sliding import SlidingWindowCounter

__all__ = [
    "CounterKey",
    "FixedWindowCounter",
    "SlidingWindowCounter",
    "WindowCounter",
    "counter_for",
]
