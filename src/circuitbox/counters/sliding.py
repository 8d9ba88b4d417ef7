from __future__ import annotations

from dataclasses import dataclass, field

from circuitbox.clock import Clock, monotonic_ms
from circuitbox.counters.base import CounterKey, window_start


@dataclass(slots=True)
class SlidingWindowCounter:
    """Two-bucket sliding window.

    ``get`` adds the share of the previous window that still overlaps the
    trailing horizon, weighted linearly and floored to a whole count.
    """

    window_size_ms: int
    clock: Clock = monotonic_ms
    _previous: dict[CounterKey, int] = field(default_factory=dict, init=False, repr=False)
    _current: dict[CounterKey, int] = field(default_factory=dict, init=False, repr=False)
    _start: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._start = window_start(self.clock(), self.window_size_ms)

    def increment(self, key: CounterKey) -> None:
        self._reconcile()
        self._current[key] = self._current.get(key, 0) + 1

    def get(self, key: CounterKey) -> int:
        now = self._reconcile()
        count = self._current.get(key, 0)
        previous = self._previous.get(key, 0)
        if previous:
            remaining = self.window_size_ms - (now - self._start)
            count += (previous * remaining) // self.window_size_ms
        return count

    def reset(self) -> None:
        self._previous = {}
        self._current = {}

    def _reconcile(self) -> int:
        now = self.clock()
        start = window_start(now, self.window_size_ms)
        if start > self._start:
            # only an adjacent window still overlaps the horizon
            if start - self.window_size_ms == self._start:
                self._previous = self._current
            else:
                self._previous = {}
            self._current = {}
            self._start = start
        return now
