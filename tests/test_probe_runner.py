from __future__ import annotations

import httpx
import pytest

from circuitbox.circuit import CircuitState
from circuitbox.config import CircuitConfig, ProbeConfig, TargetConfig
from circuitbox.metrics import ErrorType
from circuitbox.probe import run_probe


@pytest.mark.asyncio
async def test_probe_opens_circuit_on_failing_upstream() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    config = ProbeConfig(
        target=TargetConfig(base_url="http://upstream.test"),
        duration_sec=1,
        rate_per_sec=5,
        circuit=CircuitConfig(error_threshold=2, reset_timeout_ms=60_000),
        run_id="probe-1",
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await run_probe(config, client=client)

    assert result.run_id == "probe-1"
    assert len(result.events) == 5
    errors = [event.error_type for event in result.events]
    assert errors[:2] == [ErrorType.STATUS, ErrorType.STATUS]
    assert errors[2:] == [ErrorType.BROKEN] * 3
    assert [t.state for t in result.transitions] == [CircuitState.OPEN]
    assert sum(row.rejected for row in result.per_second) == 3


@pytest.mark.asyncio
async def test_probe_reports_progress() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    seen: list[tuple[int, int]] = []

    async def progress(done: int, total: int) -> None:
        seen.append((done, total))

    config = ProbeConfig(target=TargetConfig(base_url="http://upstream.test"), duration_sec=1, rate_per_sec=2)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await run_probe(config, client=client, progress=progress)

    assert seen == [(1, 1)]
    assert all(event.error_type is None for event in result.events)
    assert sum(row.succeeded for row in result.per_second) == 2


@pytest.mark.asyncio
async def test_unexpected_failures_are_recorded_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("transport exploded")

    config = ProbeConfig(
        target=TargetConfig(base_url="http://upstream.test"),
        duration_sec=1,
        rate_per_sec=2,
        circuit=CircuitConfig(error_threshold=5),
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await run_probe(config, client=client)

    assert [event.error_type for event in result.events] == [ErrorType.OTHER, ErrorType.OTHER]
    assert all(event.status_code is None for event in result.events)
