from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, ParamSpec, TypeVar

from circuitbox.breaker.abort import AbortSignal
from circuitbox.breaker.errors import CircuitError
from circuitbox.circuit import Circuit, CircuitState
from circuitbox.config import BreakerConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")

Operation = Callable[[], Awaitable[T]]
BreakablePredicate = Callable[[BaseException], bool]


def count_all(_: BaseException) -> bool:
    return True


@dataclass(slots=True)
class Breaker:
    """Runs awaitables under a circuit's admission and outcome accounting.

    The circuit may be shared with other breakers; the breaker itself holds
    no mutable state. Failures always reach the caller unchanged, and
    ``is_breakable`` only decides whether they count against the circuit.
    """

    circuit: Circuit
    timeout_ms: int | None = None
    is_breakable: BreakablePredicate = count_all

    def __post_init__(self) -> None:
        BreakerConfig(timeout_ms=self.timeout_ms)

    @classmethod
    def from_config(
        cls,
        circuit: Circuit,
        config: BreakerConfig,
        is_breakable: BreakablePredicate = count_all,
    ) -> Breaker:
        return cls(circuit=circuit, timeout_ms=config.timeout_ms, is_breakable=is_breakable)

    async def exec(self, operation: Operation[T], signal: AbortSignal | None = None) -> T:
        if not self.circuit.request():
            if self.circuit.state() is CircuitState.OPEN:
                raise CircuitError.broken(self.circuit.ttl())
            raise CircuitError.rate_limited(self.timeout_ms or 0)
        try:
            value = await self._run(operation, signal)
        except (Exception, asyncio.CancelledError) as exc:
            if self.is_breakable(exc):
                self.circuit.error()
            raise
        self.circuit.success()
        return value

    async def _run(self, operation: Operation[T], signal: AbortSignal | None) -> T:
        if signal is not None:
            signal.raise_if_aborted()
        if self.timeout_ms is None and signal is None:
            return await operation()

        task = asyncio.ensure_future(operation())
        timer: asyncio.Future | None = None
        abort: asyncio.Future | None = None
        waiters: set[asyncio.Future] = {task}
        if self.timeout_ms is not None:
            timer = asyncio.ensure_future(asyncio.sleep(self.timeout_ms / 1000))
            waiters.add(timer)
        if signal is not None:
            abort = asyncio.ensure_future(signal.wait())
            waiters.add(abort)
        try:
            done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                if waiter is not task:
                    waiter.cancel()
            if not task.done():
                # cooperative: the operation sees CancelledError at its next await
                task.cancel()
                task.add_done_callback(_discard_outcome)

        if task in done:
            return task.result()
        if timer is not None and timer in done:
            logger.debug("circuit %s: call timed out after %sms", self.circuit.name, self.timeout_ms)
            raise CircuitError.timeout_exceeded()
        if signal is None or signal.reason is None:
            msg = "call settled without completing, timing out or aborting"
            raise RuntimeError(msg)
        logger.debug("circuit %s: call aborted by caller", self.circuit.name)
        raise signal.reason


def breakable(
    circuit: Circuit,
    *,
    timeout_ms: int | None = None,
    is_breakable: BreakablePredicate = count_all,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorate an async function so every call goes through one breaker."""
    breaker = Breaker(circuit, timeout_ms=timeout_ms, is_breakable=is_breakable)

    def decorate(fn: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await breaker.exec(lambda: fn(*args, **kwargs))

        return wrapper

    return decorate


def _discard_outcome(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()
