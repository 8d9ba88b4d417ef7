from __future__ import annotations

from circuitbox.clock import Clock, monotonic_ms
from circuitbox.config import CounterType
from circuitbox.counters.base import WindowCounter
from circuitbox.counters.fixed import FixedWindowCounter
from circuitbox.counters.sliding import SlidingWindowCounter


def counter_for(counter_type: CounterType, window_size_ms: int, clock: Clock = monotonic_ms) -> WindowCounter:
    if counter_type is CounterType.FIXED:
        return FixedWindowCounter(window_size_ms, clock)
    if counter_type is CounterType.SLIDING:
        return SlidingWindowCounter(window_size_ms, clock)
    msg = f"Unsupported counter type: {counter_type}"
    raise ValueError(msg)
