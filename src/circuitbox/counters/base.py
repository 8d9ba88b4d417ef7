from __future__ import annotations

from enum import Enum
from typing import Protocol


class CounterKey(str, Enum):
    REQUEST = "request"
    SUCCESS = "success"
    ERROR = "error"


class WindowCounter(Protocol):
    """Occurrence counts over a rolling time horizon.

    Implementations reconcile against the clock inside every call, so a
    value read back never includes counts from a window that has rolled off.
    """

    def increment(self, key: CounterKey) -> None:
        ...

    def get(self, key: CounterKey) -> int:
        ...

    def reset(self) -> None:
        ...


def window_start(now_ms: int, window_size_ms: int) -> int:
    return now_ms - now_ms % window_size_ms
