# File: tests/test_scheduler.py
import asyncio

import pytest

from sitemap_scout.scheduler import Scheduler


@pytest.mark.asyncio()
async def test_runs_immediately_then_repeats():
    stop = asyncio.Event()
    stamps: list[float] = []
    loop = asyncio.get_running_loop()
    started = loop.time()

    async def job():
        stamps.append(loop.time() - started)
        if len(stamps) == 3:
            stop.set()

    scheduler = Scheduler(job, interval=0.05)
    await asyncio.wait_for(scheduler.run_forever(stop), timeout=5)

    assert scheduler.runs == 3
    assert stamps[0] < 0.05
    assert stamps[2] - stamps[0] >= 0.09


@pytest.mark.asyncio()
async def test_failed_run_does_not_stop_schedule():
    stop = asyncio.Event()
    calls = {"n": 0}

    async def job():
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("first run explodes")
        if calls["n"] == 3:
            stop.set()

    scheduler = Scheduler(job, interval=0.01)
    await asyncio.wait_for(scheduler.run_forever(stop), timeout=5)

    assert calls["n"] == 3
    assert scheduler.failures == 1


@pytest.mark.asyncio()
async def test_stop_interrupts_the_wait():
    stop = asyncio.Event()

    async def job():
        asyncio.get_running_loop().call_later(0.05, stop.set)

    scheduler = Scheduler(job, interval=3600)
    await asyncio.wait_for(scheduler.run_forever(stop), timeout=2)
    assert scheduler.runs == 1


@pytest.mark.asyncio()
async def test_tick_reports_outcome():
    async def ok():
        return None

    async def bad():
        raise ValueError("nope")

    assert await Scheduler(ok, 1).tick() is True
    assert await Scheduler(bad, 1).tick() is False


def test_interval_must_be_positive():
    async def job():
        return None

    with pytest.raises(ValueError):
        Scheduler(job, interval=0)
