from __future__ import annotations

from circuitbox.circuit.machine import Circuit, StateListener
from circuitbox.circuit.state import CircuitState, CircuitStats
from circuitbox.circuit.threshold import ThresholdPolicy, tripped

__all__ = [
    "Circuit",
    "CircuitState",
    "CircuitStats",
    "StateListener",
    "ThresholdPolicy",
    "tripped",
]
