from __future__ import annotations

from collections import defaultdict
from typing import Iterable

import numpy as np

from circuitbox.metrics.models import CallEvent, ErrorType, PerSecondMetrics


def aggregate_per_second(
    run_id: str,
    events: Iterable[CallEvent],
    duration_sec: int,
    start_mono: float,
) -> list[PerSecondMetrics]:
    buckets: dict[int, list[CallEvent]] = defaultdict(list)
    for event in events:
        second = max(0, int(event.mono_time - start_mono))
        buckets[second].append(event)

    metrics: list[PerSecondMetrics] = []
    last = max([duration_sec - 1, *buckets])
    for second in range(last + 1):
        bucket = buckets.get(second, [])
        admitted = [e for e in bucket if not e.rejected]
        latencies = [e.latency_ms for e in admitted if e.latency_ms >= 0]
        succeeded = sum(1 for e in admitted if e.error_type is None)
        timeouts = sum(1 for e in admitted if e.error_type is ErrorType.TIMEOUT)
        if latencies:
            p50 = float(np.percentile(latencies, 50))
            p95 = float(np.percentile(latencies, 95))
            p99 = float(np.percentile(latencies, 99))
        else:
            p50 = p95 = p99 = 0.0
        total = max(1, len(admitted))
        metrics.append(
            PerSecondMetrics(
                run_id=run_id,
                second=second,
                attempted=len(bucket),
                admitted=len(admitted),
                succeeded=succeeded,
                rejected=len(bucket) - len(admitted),
                p50_ms=p50,
                p95_ms=p95,
                p99_ms=p99,
                error_rate=(len(admitted) - succeeded) / total,
                timeout_rate=timeouts / total,
            )
        )
    return metrics
