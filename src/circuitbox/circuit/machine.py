from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable

from circuitbox.circuit.state import CircuitState, CircuitStats
from circuitbox.circuit.threshold import ThresholdPolicy, tripped
from circuitbox.clock import Clock, monotonic_ms
from circuitbox.config import CircuitConfig, CounterType
from circuitbox.counters import CounterKey, WindowCounter, counter_for

logger = logging.getLogger(__name__)

StateListener = Callable[[CircuitState], None]


@dataclass(slots=True)
class Circuit:
    """Closed / open / half-open admission state machine.

    Admission (``request``) and outcome reporting (``success``/``error``) are
    separate synchronous steps, so under asyncio each one is atomic while the
    call it guards may be awaited in between. The owned counter only ever
    holds counts for the current state episode: every transition resets it.
    """

    counter: WindowCounter
    reset_timeout_ms: int
    error_threshold: float = 1
    volume_threshold: int = 1
    success_threshold: int = 1
    initial_state: CircuitState = CircuitState.CLOSED
    name: str = "circuit"
    clock: Clock = monotonic_ms
    policy: ThresholdPolicy = tripped
    _state: CircuitState = field(default=CircuitState.CLOSED, init=False, repr=False)
    _expiry: int = field(default=0, init=False, repr=False)
    _listeners: list[StateListener] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        CircuitConfig(
            error_threshold=self.error_threshold,
            volume_threshold=self.volume_threshold,
            reset_timeout_ms=self.reset_timeout_ms,
            success_threshold=self.success_threshold,
        )
        self._state = self.initial_state
        if self._state is CircuitState.OPEN:
            self._expiry = self.clock()

    @classmethod
    def fixed_window(
        cls,
        window_size_ms: int = 30_000,
        *,
        error_threshold: float = 1,
        volume_threshold: int = 1,
        reset_timeout_ms: int = 30_000,
        success_threshold: int = 1,
        initial_state: CircuitState = CircuitState.CLOSED,
        name: str = "circuit",
        clock: Clock = monotonic_ms,
    ) -> Circuit:
        config = CircuitConfig(
            window_size_ms=window_size_ms,
            error_threshold=error_threshold,
            volume_threshold=volume_threshold,
            reset_timeout_ms=reset_timeout_ms,
            success_threshold=success_threshold,
            counter=CounterType.FIXED,
        )
        return cls.from_config(config, clock=clock, name=name, initial_state=initial_state)

    @classmethod
    def sliding_window(
        cls,
        window_size_ms: int = 30_000,
        *,
        error_threshold: float = 1,
        volume_threshold: int = 1,
        reset_timeout_ms: int = 30_000,
        success_threshold: int = 1,
        initial_state: CircuitState = CircuitState.CLOSED,
        name: str = "circuit",
        clock: Clock = monotonic_ms,
    ) -> Circuit:
        config = CircuitConfig(
            window_size_ms=window_size_ms,
            error_threshold=error_threshold,
            volume_threshold=volume_threshold,
            reset_timeout_ms=reset_timeout_ms,
            success_threshold=success_threshold,
            counter=CounterType.SLIDING,
        )
        return cls.from_config(config, clock=clock, name=name, initial_state=initial_state)

    @classmethod
    def from_config(
        cls,
        config: CircuitConfig,
        clock: Clock = monotonic_ms,
        name: str = "circuit",
        initial_state: CircuitState = CircuitState.CLOSED,
    ) -> Circuit:
        return cls(
            counter=counter_for(config.counter, config.window_size_ms, clock),
            reset_timeout_ms=config.reset_timeout_ms,
            error_threshold=config.error_threshold,
            volume_threshold=config.volume_threshold,
            success_threshold=config.success_threshold,
            initial_state=initial_state,
            name=name,
            clock=clock,
        )

    def request(self) -> bool:
        if self._state is CircuitState.OPEN:
            if self._expiry > self.clock():
                return False
            self._expiry = 0
            self._transition(CircuitState.HALF_OPEN)
            self.counter.increment(CounterKey.REQUEST)
        elif self._state is CircuitState.HALF_OPEN:
            if self.counter.get(CounterKey.REQUEST) >= self.success_threshold:
                return False
            self.counter.increment(CounterKey.REQUEST)
        return True

    def success(self) -> None:
        if self._state is CircuitState.OPEN:
            return
        self.counter.increment(CounterKey.SUCCESS)
        if self._state is CircuitState.HALF_OPEN and self.counter.get(CounterKey.SUCCESS) >= self.success_threshold:
            self._transition(CircuitState.CLOSED)

    def error(self) -> None:
        if self._state is CircuitState.CLOSED:
            self.counter.increment(CounterKey.ERROR)
            if self.policy(
                self.error_threshold,
                self.volume_threshold,
                self.counter.get(CounterKey.SUCCESS),
                self.counter.get(CounterKey.ERROR),
            ):
                self._open()
        elif self._state is CircuitState.HALF_OPEN:
            self._open()

    def state(self) -> CircuitState:
        return self._state

    def stats(self) -> CircuitStats:
        return CircuitStats(
            state=self._state,
            request_count=self.request_count(),
            success_count=self.success_count(),
            error_count=self.error_count(),
        )

    def request_count(self) -> int:
        return self.counter.get(CounterKey.REQUEST)

    def success_count(self) -> int:
        return self.counter.get(CounterKey.SUCCESS)

    def error_count(self) -> int:
        return self.counter.get(CounterKey.ERROR)

    def expiry(self) -> int:
        return self._expiry

    def ttl(self) -> int:
        """Milliseconds until an open circuit may admit a probe, else 0."""
        if self._state is not CircuitState.OPEN:
            return 0
        return max(0, self._expiry - self.clock())

    def max_age(self) -> int:
        """``ttl`` in whole seconds, rounded up, for Retry-After style headers."""
        return math.ceil(self.ttl() / 1000)

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        self._listeners.remove(listener)

    def _open(self) -> None:
        self._expiry = self.clock() + self.reset_timeout_ms
        self._transition(CircuitState.OPEN)

    def _transition(self, state: CircuitState) -> None:
        previous = self._state
        self._state = state
        self.counter.reset()
        logger.info("circuit %s: %s -> %s", self.name, previous.value, state.value)
        for listener in list(self._listeners):
            listener(state)
