from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class CounterType(str, Enum):
    FIXED = "fixed"
    SLIDING = "sliding"


@dataclass(frozen=True, slots=True)
class CircuitConfig:
    window_size_ms: int = 30_000
    error_threshold: float = 1
    volume_threshold: int = 1
    reset_timeout_ms: int = 30_000
    success_threshold: int = 1
    counter: CounterType = CounterType.FIXED

    def __post_init__(self) -> None:
        if self.window_size_ms <= 0:
            msg = f"window_size_ms must be positive, got {self.window_size_ms}"
            raise ValueError(msg)
        if self.error_threshold < 0:
            msg = f"error_threshold must not be negative, got {self.error_threshold}"
            raise ValueError(msg)
        if self.reset_timeout_ms < 0:
            msg = f"reset_timeout_ms must not be negative, got {self.reset_timeout_ms}"
            raise ValueError(msg)
        if self.success_threshold < 1:
            msg = f"success_threshold must be at least 1, got {self.success_threshold}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class BreakerConfig:
    timeout_ms: int | None = None

    def __post_init__(self) -> None:
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            msg = f"timeout_ms must be positive, got {self.timeout_ms}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class TargetConfig:
    base_url: str
    method: str = "GET"
    timeout_sec: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProbeConfig:
    target: TargetConfig
    duration_sec: int
    rate_per_sec: float = 10.0
    circuit: CircuitConfig = field(default_factory=CircuitConfig)
    breaker: BreakerConfig = field(default_factory=BreakerConfig)
    run_id: str | None = None

    def __post_init__(self) -> None:
        if self.duration_sec <= 0:
            msg = f"duration_sec must be positive, got {self.duration_sec}"
            raise ValueError(msg)
        if self.rate_per_sec < 0:
            msg = f"rate_per_sec must not be negative, got {self.rate_per_sec}"
            raise ValueError(msg)
