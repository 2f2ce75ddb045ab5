# File: sitemap_scout/engine.py
"""sitemap_scout.engine: Оркестрация прогонов обхода и владение ресурсом загрузки."""

from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Optional, Type

from sitemap_scout.config import SitemapConfig
from sitemap_scout.crawler.crawler import CrawlRun
from sitemap_scout.crawler.fetcher import BaseFetcher, HttpFetcher
from sitemap_scout.crawler.models import RunReport
from sitemap_scout.logger import logger
from sitemap_scout.sitemap import SitemapWriter

__all__ = ["Engine", "create_fetcher", "generate_sitemap"]


def create_fetcher(config: SitemapConfig) -> BaseFetcher:
    """Возвращает бэкенд загрузки, выбранный в конфиге."""
    if config.backend == "browser":
        from sitemap_scout.crawler.renderer import BrowserFetcher

        return BrowserFetcher(config)
    return HttpFetcher(config)


class Engine:
    """Фасад для CLI, планировщика и сервера.

    Держит один fetcher на всё время жизни процесса и создаёт новый
    :class:`CrawlRun` на каждый прогон. Прогоны не пересекаются.
    """

    def __init__(self, config: SitemapConfig, fetcher: Optional[BaseFetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher or create_fetcher(config)
        self.writer = SitemapWriter(config.output_path)
        self.last_report: Optional[RunReport] = None
        self.runs = 0
        self._run_lock = asyncio.Lock()

    async def __aenter__(self) -> Engine:
        await self.fetcher.open()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.fetcher.close()

    @property
    def running(self) -> bool:
        return self._run_lock.locked()

    async def run_once(self) -> RunReport:
        """Один полный прогон по всем корням; ошибки записи пробрасываются."""
        async with self._run_lock:
            self.runs += 1
            run = CrawlRun(self.config, self.fetcher, self.writer)
            try:
                report = await run.execute()
            except Exception as exc:
                logger.error("Run #%d failed: %s", self.runs, exc)
                raise
        self.last_report = report
        return report


async def generate_sitemap(config: SitemapConfig) -> RunReport:
    """Открывает Engine, выполняет один прогон и освобождает ресурсы."""
    async with Engine(config) as engine:
        return await engine.run_once()
