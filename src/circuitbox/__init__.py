"""Circuit breakers for asyncio callers."""

from __future__ import annotations

from circuitbox.breaker import AbortError, AbortSignal, Breaker, CircuitError, CircuitErrorKind, breakable
from circuitbox.circuit import Circuit, CircuitState, CircuitStats, tripped
from circuitbox.config import BreakerConfig, CircuitConfig, CounterType
from circuitbox.counters import FixedWindowCounter, SlidingWindowCounter, WindowCounter

__all__ = [
    "AbortError",
    "AbortSignal",
    "Breaker",
    "BreakerConfig",
    "Circuit",
    "CircuitConfig",
    "CircuitError",
    "CircuitErrorKind",
    "CircuitState",
    "CircuitStats",
    "CounterType",
    "FixedWindowCounter",
    "SlidingWindowCounter",
    "WindowCounter",
    "breakable",
    "tripped",
]
