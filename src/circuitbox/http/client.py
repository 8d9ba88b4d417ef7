from __future__ import annotations

import asyncio

import httpx

from circuitbox.breaker import AbortError, CircuitError, CircuitErrorKind
from circuitbox.circuit import Circuit
from circuitbox.config import TargetConfig
from circuitbox.metrics import ErrorType

# client errors that still say something about the upstream's health
_BREAKABLE_CLIENT_STATUSES = frozenset({408, 429})

_CIRCUIT_ERROR_TYPES = {
    CircuitErrorKind.BROKEN: ErrorType.BROKEN,
    CircuitErrorKind.RATE_LIMITED: ErrorType.RATE_LIMITED,
    CircuitErrorKind.TIMEOUT_EXCEEDED: ErrorType.TIMEOUT,
}


class UpstreamStatusError(Exception):
    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"Failed with status code {response.status_code}")
        self.response = response
        self.status_code = response.status_code


async def send_request(client: httpx.AsyncClient, target: TargetConfig) -> httpx.Response:
    resp = await client.request(
        target.method,
        target.base_url,
        headers=dict(target.headers),
        timeout=target.timeout_sec,
    )
    if resp.status_code >= 400:
        raise UpstreamStatusError(resp)
    return resp


def is_breakable_http_error(exc: BaseException) -> bool:
    if isinstance(exc, UpstreamStatusError):
        return exc.status_code >= 500 or exc.status_code in _BREAKABLE_CLIENT_STATUSES
    return True


def error_type_for(exc: BaseException) -> ErrorType:
    if isinstance(exc, CircuitError):
        return _CIRCUIT_ERROR_TYPES[exc.kind]
    if isinstance(exc, httpx.TimeoutException):
        return ErrorType.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorType.CONNECT
    if isinstance(exc, httpx.ReadError):
        return ErrorType.READ
    if isinstance(exc, UpstreamStatusError):
        return ErrorType.STATUS
    if isinstance(exc, (AbortError, asyncio.CancelledError)):
        return ErrorType.ABORTED
    return ErrorType.OTHER


def retry_after_headers(circuit: Circuit) -> dict[str, str]:
    return {"Retry-After": str(circuit.max_age())}
