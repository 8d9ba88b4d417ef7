from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from circuitbox.circuit import CircuitState


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    STATUS = "status"
    BROKEN = "broken"
    RATE_LIMITED = "rate_limited"
    ABORTED = "aborted"
    OTHER = "other"


REJECTIONS = frozenset({ErrorType.BROKEN, ErrorType.RATE_LIMITED})


@dataclass(frozen=True, slots=True)
class CallEvent:
    run_id: str
    wall_time: float
    mono_time: float
    latency_ms: float
    status_code: int | None
    error_type: ErrorType | None
    state: CircuitState

    @property
    def rejected(self) -> bool:
        return self.error_type in REJECTIONS


@dataclass(frozen=True, slots=True)
class StateTransition:
    run_id: str
    mono_time: float
    state: CircuitState


@dataclass(frozen=True, slots=True)
class PerSecondMetrics:
    run_id: str
    second: int
    attempted: int
    admitted: int
    succeeded: int
    rejected: int
    p50_ms: float
    p95_ms: float
    p99_ms: float
    error_rate: float
    timeout_rate: float
