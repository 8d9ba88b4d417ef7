from __future__ import annotations

import asyncio

from circuitbox.breaker.errors import AbortError


class AbortSignal:
    """Caller-owned cancellation for ``Breaker.exec``.

    Aborting is one-shot: the first reason wins and later calls are ignored.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: BaseException | None = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> BaseException | None:
        return self._reason

    def abort(self, reason: BaseException | None = None) -> None:
        if self.aborted:
            return
        self._reason = reason if reason is not None else AbortError("operation aborted")
        self._event.set()

    def raise_if_aborted(self) -> None:
        if self._reason is not None:
            raise self._reason

    async def wait(self) -> BaseException | None:
        await self._event.wait()
        return self._reason
