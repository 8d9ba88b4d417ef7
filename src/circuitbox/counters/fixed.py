from __future__ import annotations

from dataclasses import dataclass, field

from circuitbox.clock import Clock, monotonic_ms
from circuitbox.counters.base import CounterKey, window_start


@dataclass(slots=True)
class FixedWindowCounter:
    window_size_ms: int
    clock: Clock = monotonic_ms
    _data: dict[CounterKey, int] = field(default_factory=dict, init=False, repr=False)
    _start: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._start = window_start(self.clock(), self.window_size_ms)

    def increment(self, key: CounterKey) -> None:
        self._reconcile()
        self._data[key] = self._data.get(key, 0) + 1

    def get(self, key: CounterKey) -> int:
        self._reconcile()
        return self._data.get(key, 0)

    def reset(self) -> None:
        self._data = {}

    def _reconcile(self) -> None:
        start = window_start(self.clock(), self.window_size_ms)
        if start > self._start:
            self._start = start
            self._data = {}
