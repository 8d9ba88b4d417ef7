from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from circuitbox.breaker import Breaker
from circuitbox.circuit import Circuit, CircuitState
from circuitbox.config import ProbeConfig
from circuitbox.http import UpstreamStatusError, error_type_for, is_breakable_http_error, send_request
from circuitbox.metrics import CallEvent, ErrorType, PerSecondMetrics, StateTransition, aggregate_per_second


@dataclass(frozen=True, slots=True)
class ProbeResult:
    run_id: str
    events: list[CallEvent]
    per_second: list[PerSecondMetrics]
    transitions: list[StateTransition]
    started_mono: float


ProgressCallback = Callable[[int, int], Awaitable[None]]


def _new_run_id() -> str:
    return uuid.uuid4().hex


async def run_probe(
    config: ProbeConfig,
    client: httpx.AsyncClient | None = None,
    progress: ProgressCallback | None = None,
) -> ProbeResult:
    run_id = config.run_id or _new_run_id()
    circuit = Circuit.from_config(config.circuit, name=run_id)
    breaker = Breaker.from_config(circuit, config.breaker, is_breakable=is_breakable_http_error)
    events: list[CallEvent] = []
    transitions: list[StateTransition] = []
    started_mono = time.perf_counter()

    def on_state(state: CircuitState) -> None:
        transitions.append(StateTransition(run_id=run_id, mono_time=time.perf_counter(), state=state))

    circuit.add_listener(on_state)
    try:
        if client is None:
            async with httpx.AsyncClient() as owned:
                await _open_loop(owned, run_id, config, breaker, events, progress, started_mono)
        else:
            await _open_loop(client, run_id, config, breaker, events, progress, started_mono)
    finally:
        circuit.remove_listener(on_state)

    per_second = aggregate_per_second(run_id, events, config.duration_sec, started_mono)
    return ProbeResult(
        run_id=run_id,
        events=events,
        per_second=per_second,
        transitions=transitions,
        started_mono=started_mono,
    )


async def _open_loop(
    client: httpx.AsyncClient,
    run_id: str,
    config: ProbeConfig,
    breaker: Breaker,
    events: list[CallEvent],
    progress: ProgressCallback | None,
    started_mono: float,
) -> None:
    tasks: list[asyncio.Task[None]] = []
    owed = 0.0
    for second in range(config.duration_sec):
        owed += config.rate_per_sec
        n = int(owed)
        owed -= n
        for i in range(n):
            tasks.append(
                asyncio.create_task(
                    _schedule_one(client, run_id, config, breaker, events, started_mono + second + i / n)
                )
            )
        await _sleep_until_time(started_mono + second + 1)
        if progress:
            await progress(second + 1, config.duration_sec)
    if tasks:
        await asyncio.gather(*tasks)


async def _schedule_one(
    client: httpx.AsyncClient,
    run_id: str,
    config: ProbeConfig,
    breaker: Breaker,
    events: list[CallEvent],
    at_mono: float,
) -> None:
    await _sleep_until_time(at_mono)
    events.append(await probe_once(client, run_id, config, breaker))


async def probe_once(
    client: httpx.AsyncClient,
    run_id: str,
    config: ProbeConfig,
    breaker: Breaker,
) -> CallEvent:
    start_wall = time.time()
    start_mono = time.perf_counter()
    status_code: int | None = None
    error_type: ErrorType | None = None
    try:
        resp = await breaker.exec(lambda: send_request(client, config.target))
        status_code = resp.status_code
    except UpstreamStatusError as exc:
        status_code = exc.status_code
        error_type = ErrorType.STATUS
    except Exception as exc:
        error_type = error_type_for(exc)
    return CallEvent(
        run_id=run_id,
        wall_time=start_wall,
        mono_time=time.perf_counter(),
        latency_ms=(time.perf_counter() - start_mono) * 1000.0,
        status_code=status_code,
        error_type=error_type,
        state=breaker.circuit.state(),
    )


async def _sleep_until_time(target: float) -> None:
    delay = max(0.0, target - time.perf_counter())
    if delay > 0:
        await asyncio.sleep(delay)
