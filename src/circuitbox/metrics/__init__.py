from __future__ import annotations

from circuitbox.metrics.aggregator import aggregate_per_second
from circuitbox.metrics.models import CallEvent, ErrorType, PerSecondMetrics, StateTransition

__all__ = ["CallEvent", "ErrorType", "PerSecondMetrics", "StateTransition", "aggregate_per_second"]
