from __future__ import annotations

from circuitbox.config.models import (
    BreakerConfig,
    CircuitConfig,
    CounterType,
    ProbeConfig,
    TargetConfig,
)

__all__ = [
    "BreakerConfig",
    "CircuitConfig",
    "CounterType",
    "ProbeConfig",
    "TargetConfig",
]
