# sitemap_scout/scheduler.py
"""
Periodic runner: one run at start-up, then one every ``interval`` seconds.
"""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from sitemap_scout.logger import logger

Job = Callable[[], Awaitable[Any]]


class Scheduler:
    """Runs *job* immediately and then on a fixed period until stopped.

    The period is measured from the start of each run. A run that overruns
    its slot is followed by the next one right away; runs never overlap.
    A failing run is logged and has no effect on later ones.
    """

    def __init__(self, job: Job, interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.job = job
        self.interval = interval
        self.runs = 0
        self.failures = 0

    async def tick(self) -> bool:
        """Execute one run; True on success."""
        self.runs += 1
        logger.info("Scheduled run #%d started", self.runs)
        try:
            await self.job()
        except Exception:
            self.failures += 1
            logger.exception("Scheduled run #%d failed", self.runs)
            return False
        logger.info("Scheduled run #%d finished", self.runs)
        return True

    async def run_forever(self, stop: Optional[asyncio.Event] = None) -> None:
        stop = stop or asyncio.Event()
        loop = asyncio.get_running_loop()
        while not stop.is_set():
            started = loop.time()
            await self.tick()
            delay = max(0.0, self.interval - (loop.time() - started))
            try:
                await asyncio.wait_for(stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass
