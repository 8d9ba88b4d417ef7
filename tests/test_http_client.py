from __future__ import annotations

import httpx
import pytest

from circuitbox.breaker import AbortError, Breaker, CircuitError
from circuitbox.circuit import Circuit, CircuitState
from circuitbox.config import TargetConfig
from circuitbox.http import (
    UpstreamStatusError,
    error_type_for,
    is_breakable_http_error,
    retry_after_headers,
    send_request,
)
from circuitbox.metrics import ErrorType

from conftest import FakeClock

TARGET = TargetConfig(base_url="http://upstream.test/items", headers={"x-probe": "1"})


def _client(statuses: list[int]) -> httpx.AsyncClient:
    remaining = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["x-probe"] == "1"
        return httpx.Response(remaining.pop(0), json={"ok": True})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_send_request_returns_success_response() -> None:
    async with _client([200]) as client:
        resp = await send_request(client, TARGET)
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


@pytest.mark.asyncio
async def test_send_request_raises_on_error_status() -> None:
    async with _client([503]) as client:
        with pytest.raises(UpstreamStatusError) as info:
            await send_request(client, TARGET)
    assert info.value.status_code == 503
    assert str(info.value) == "Failed with status code 503"


@pytest.mark.asyncio
async def test_client_errors_do_not_trip_breaker(clock: FakeClock) -> None:
    circuit = Circuit.fixed_window(1000, reset_timeout_ms=100, clock=clock)
    breaker = Breaker(circuit, is_breakable=is_breakable_http_error)
    async with _client([404, 400, 500, 200]) as client:
        for _ in range(2):
            with pytest.raises(UpstreamStatusError):
                await breaker.exec(lambda: send_request(client, TARGET))
        assert circuit.state() is CircuitState.CLOSED
        with pytest.raises(UpstreamStatusError):
            await breaker.exec(lambda: send_request(client, TARGET))
        assert circuit.state() is CircuitState.OPEN
        with pytest.raises(CircuitError):
            await breaker.exec(lambda: send_request(client, TARGET))


@pytest.mark.parametrize(
    ("status", "expected"),
    [(400, False), (404, False), (408, True), (429, True), (500, True), (503, True)],
)
def test_is_breakable_http_error(status: int, expected: bool) -> None:
    exc = UpstreamStatusError(httpx.Response(status))
    assert is_breakable_http_error(exc) is expected


def test_transport_errors_are_breakable() -> None:
    assert is_breakable_http_error(httpx.ConnectError("refused")) is True


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (httpx.ReadTimeout("slow"), ErrorType.TIMEOUT),
        (httpx.ConnectError("refused"), ErrorType.CONNECT),
        (httpx.ReadError("reset"), ErrorType.READ),
        (UpstreamStatusError(httpx.Response(502)), ErrorType.STATUS),
        (CircuitError.broken(100), ErrorType.BROKEN),
        (CircuitError.rate_limited(0), ErrorType.RATE_LIMITED),
        (CircuitError.timeout_exceeded(), ErrorType.TIMEOUT),
        (AbortError("stop"), ErrorType.ABORTED),
        (RuntimeError("x"), ErrorType.OTHER),
    ],
)
def test_error_type_for(exc: BaseException, expected: ErrorType) -> None:
    assert error_type_for(exc) is expected


def test_retry_after_headers(clock: FakeClock) -> None:
    circuit = Circuit.fixed_window(10_000, reset_timeout_ms=1500, clock=clock)
    assert retry_after_headers(circuit) == {"Retry-After": "0"}
    circuit.error()
    assert retry_after_headers(circuit) == {"Retry-After": "2"}
