from __future__ import annotations

import pytest

from circuitbox.breaker import CircuitError, CircuitErrorKind, breakable
from circuitbox.circuit import Circuit, CircuitState

from conftest import FakeClock


class Inventory:
    def __init__(self, circuit: Circuit) -> None:
        self.calls: list[str] = []

        @breakable(circuit)
        async def lookup(sku: str, *, fail: bool = False) -> str:
            """Look up a SKU."""
            self.calls.append(sku)
            if fail:
                raise ConnectionError(sku)
            return sku.upper()

        self.lookup = lookup


@pytest.mark.asyncio
async def test_wrapper_forwards_arguments(clock: FakeClock) -> None:
    inventory = Inventory(Circuit.fixed_window(1000, reset_timeout_ms=100, clock=clock))
    assert await inventory.lookup("abc") == "ABC"
    assert inventory.lookup.__name__ == "lookup"
    assert inventory.lookup.__doc__ == "Look up a SKU."


@pytest.mark.asyncio
async def test_wrapper_breaks_after_failure(clock: FakeClock) -> None:
    circuit = Circuit.fixed_window(1000, reset_timeout_ms=100, clock=clock)
    inventory = Inventory(circuit)
    with pytest.raises(ConnectionError):
        await inventory.lookup("abc", fail=True)
    assert circuit.state() is CircuitState.OPEN
    with pytest.raises(CircuitError) as info:
        await inventory.lookup("def")
    assert info.value.kind is CircuitErrorKind.BROKEN
    assert inventory.calls == ["abc"]


@pytest.mark.asyncio
async def test_decorated_functions_share_a_circuit(clock: FakeClock) -> None:
    circuit = Circuit.fixed_window(1000, error_threshold=2, reset_timeout_ms=100, clock=clock)

    @breakable(circuit)
    async def read() -> None:
        raise TimeoutError

    @breakable(circuit, is_breakable=lambda exc: False)
    async def write() -> None:
        raise TimeoutError

    with pytest.raises(TimeoutError):
        await write()
    with pytest.raises(TimeoutError):
        await read()
    assert circuit.error_count() == 1
