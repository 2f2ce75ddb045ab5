# File: sitemap_scout/service.py
"""sitemap_scout.service: Долгоживущий процесс: планировщик + HTTP-сервер + сигналы."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import Optional

from aiohttp import web

from sitemap_scout.config import SitemapConfig
from sitemap_scout.engine import Engine
from sitemap_scout.logger import logger
from sitemap_scout.scheduler import Scheduler
from sitemap_scout.server import create_app

__all__ = ["serve"]


def _install_signal_handlers(stop: asyncio.Event) -> list[signal.Signals]:
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        # not available on Windows event loops
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)
    return installed


async def serve(
    config: SitemapConfig,
    stop: Optional[asyncio.Event] = None,
    engine: Optional[Engine] = None,
) -> None:
    """Запускает сервис и ждёт сигнала остановки.

    При остановке планировщик отменяется, сервер закрывается, а ресурс
    загрузки (сессия или браузер) освобождается до выхода.
    """
    stop = stop or asyncio.Event()
    installed = _install_signal_handlers(stop)

    async with engine or Engine(config) as active:
        runner = web.AppRunner(create_app(config, active))
        await runner.setup()
        site = web.TCPSite(runner, config.host, config.port)
        await site.start()
        logger.info("Server running on http://%s:%s", config.host, config.port)
        logger.info("Sitemap will be regenerated every %s seconds", config.interval)

        scheduler = Scheduler(active.run_once, config.interval)
        task = asyncio.create_task(scheduler.run_forever(stop))
        try:
            await stop.wait()
        finally:
            logger.info("Shutting down")
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            await runner.cleanup()
            loop = asyncio.get_running_loop()
            for sig in installed:
                loop.remove_signal_handler(sig)
