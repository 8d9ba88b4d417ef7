from __future__ import annotations

from circuitbox.breaker.abort import AbortSignal
from circuitbox.breaker.errors import AbortError, CircuitError, CircuitErrorKind
from circuitbox.breaker.executor import BreakablePredicate, Breaker, Operation, breakable, count_all

__all__ = [
    "AbortError",
    "AbortSignal",
    "BreakablePredicate",
    "Breaker",
    "CircuitError",
    "CircuitErrorKind",
    "Operation",
    "breakable",
    "count_all",
]
