# purchase_sdk/tests/controllers/test_scheduling.py
import asyncio

import pytest

from purchase_sdk.controllers.scheduling import Debouncer, SingleFlight

pytestmark = pytest.mark.asyncio


async def test_debouncer_fires_once_after_burst():
    calls = []
    debouncer = Debouncer(0.05, lambda: calls.append("fired"))

    debouncer.trigger()
    await asyncio.sleep(0.01)
    debouncer.trigger()
    debouncer.trigger()
    assert debouncer.pending

    await debouncer.wait()

    assert calls == ["fired"]
    assert not debouncer.pending


async def test_debouncer_cancel_prevents_callback():
    calls = []
    debouncer = Debouncer(0.02, lambda: calls.append("fired"))

    debouncer.trigger()
    debouncer.cancel()
    await asyncio.sleep(0.05)

    assert calls == []
    assert not debouncer.pending


async def test_debouncer_negative_delay_is_clamped():
    assert Debouncer(-1, lambda: None).delay == 0.0


async def test_single_flight_tokens_increase():
    flight = SingleFlight()

    async def work(token):
        return token

    first = flight.start(work)
    second = flight.start(work)
    await asyncio.wait({first, second})

    assert first.cancelled()
    assert await second == 2
    assert flight.is_current(2)
    assert not flight.is_current(1)


async def test_single_flight_without_cancellation_keeps_old_task_running():
    flight = SingleFlight(cancel_superseded=False)
    release = asyncio.Event()
    seen = []

    async def slow(token):
        await release.wait()
        seen.append((token, flight.is_current(token)))

    async def fast(token):
        seen.append((token, flight.is_current(token)))

    first = flight.start(slow)
    flight.start(fast)
    await flight.wait()
    release.set()
    await first

    assert seen == [(2, True), (1, False)]


async def test_single_flight_cancel_invalidates_current_token():
    flight = SingleFlight()
    started = asyncio.Event()

    async def work(token):
        started.set()
        await asyncio.sleep(10)

    task = flight.start(work)
    await started.wait()
    flight.cancel()
    await asyncio.wait({task})

    assert task.cancelled()
    assert not flight.is_current(1)
    assert not flight.in_flight
