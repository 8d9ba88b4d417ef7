from __future__ import annotations

import math
from enum import Enum


class CircuitErrorKind(str, Enum):
    BROKEN = "broken"
    RATE_LIMITED = "rate_limited"
    TIMEOUT_EXCEEDED = "timeout_exceeded"


_MESSAGES = {
    CircuitErrorKind.BROKEN: "Circuit broken",
    CircuitErrorKind.RATE_LIMITED: "Request rate limit exceeded",
    CircuitErrorKind.TIMEOUT_EXCEEDED: "Request timeout exceeded",
}


class CircuitError(Exception):
    """Raised by a breaker instead of (or while giving up on) the wrapped call.

    ``retry_after_ms`` is how long the caller should back off: the circuit's
    remaining TTL when broken, the breaker timeout when rate limited.
    """

    def __init__(self, kind: CircuitErrorKind, retry_after_ms: int = 0) -> None:
        super().__init__(_MESSAGES[kind])
        self.kind = kind
        self.retry_after_ms = retry_after_ms

    @property
    def retry_after_sec(self) -> int:
        return math.ceil(self.retry_after_ms / 1000)

    @classmethod
    def broken(cls, retry_after_ms: int) -> CircuitError:
        return cls(CircuitErrorKind.BROKEN, retry_after_ms)

    @classmethod
    def rate_limited(cls, retry_after_ms: int) -> CircuitError:
        return cls(CircuitErrorKind.RATE_LIMITED, retry_after_ms)

    @classmethod
    def timeout_exceeded(cls) -> CircuitError:
        return cls(CircuitErrorKind.TIMEOUT_EXCEEDED)

    def __repr__(self) -> str:
        return f"CircuitError(kind={self.kind.value!r}, retry_after_ms={self.retry_after_ms})"


class AbortError(Exception):
    pass
