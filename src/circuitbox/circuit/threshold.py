from __future__ import annotations

from typing import Callable

ThresholdPolicy = Callable[[float, int, int, int], bool]


def is_percentage(error_threshold: float) -> bool:
    return 0 < error_threshold < 1


def tripped(error_threshold: float, volume_threshold: int, success_count: int, error_count: int) -> bool:
    """Return True when the error counts should open the circuit.

    Thresholds in ``(0, 1)`` are error ratios; anything else is an absolute
    error count. Either way nothing trips until ``volume_threshold`` outcomes
    have been seen.
    """
    total = success_count + error_count
    if total < volume_threshold:
        return False
    if is_percentage(error_threshold):
        if total == 0:
            return False
        return error_count / total >= error_threshold
    return error_count >= error_threshold
