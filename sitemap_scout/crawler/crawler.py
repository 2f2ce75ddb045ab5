# === FILE: sitemap_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import List, Optional, Set

from sitemap_scout.config import SitemapConfig
from sitemap_scout.crawler.fetcher import BaseFetcher
from sitemap_scout.crawler.link_extractor import ExtractedLinks, extract_links
from sitemap_scout.crawler.models import CrawlItem, CrawlState, RunReport
from sitemap_scout.logger import logger
from sitemap_scout.sitemap import PersistenceError, SitemapWriter
from sitemap_scout.utils import in_scope, is_page_url, normalize_url

__all__ = ("CrawlRun",)


class CrawlRun:
    """Один полный обход всех корней: свежее состояние, обход, запись, конец.

    Корни обходятся по очереди; внутри корня ``concurrency`` воркеров
    разбирают очередь (url, root, depth) уровень за уровнем: следующая
    глубина начинается, только когда предыдущая обойдена целиком. Посещённые URL
    общие для всех корней прогона.
    """

    def __init__(
        self,
        config: SitemapConfig,
        fetcher: BaseFetcher,
        writer: SitemapWriter,
        *,
        started_at: Optional[datetime] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.writer = writer
        self.state = CrawlState(max_pages=config.max_pages)
        self.started_at = started_at or datetime.now(timezone.utc)
        self.failed: List[str] = []
        self._error: Optional[PersistenceError] = None

    async def execute(self) -> RunReport:
        logger.info("Starting sitemap generation for %d root(s)", len(self.config.roots))
        start = time.monotonic()
        for root in self.config.roots:
            try:
                await self.crawl_root(root)
            except PersistenceError:
                raise
            except Exception:
                logger.exception("Crawl of root %s failed", root)
        await self.persist()
        duration = time.monotonic() - start
        report = RunReport(
            started_at=self.started_at,
            finished_at=datetime.now(timezone.utc),
            urls=sorted(self.state.visited),
            failed=sorted(self.failed),
        )
        logger.info(
            "Sitemap generated with %d URLs in %.2f s (%d failed), saved to %s",
            report.count,
            duration,
            len(report.failed),
            self.writer.path,
        )
        return report

    async def crawl_root(self, root: str) -> None:
        logger.info("Crawling root: %s", root)
        queue: asyncio.Queue[CrawlItem] = asyncio.Queue()
        found: List[CrawlItem] = []
        workers = [
            asyncio.create_task(self._worker(queue, found)) for _ in range(self.config.concurrency)
        ]
        try:
            level = [CrawlItem(root, root, 0)]
            # one hop count at a time: a page is always claimed at its shortest depth
            while level and self._error is None:
                for item in level:
                    queue.put_nowait(item)
                await queue.join()
                level = sorted(set(found))
                found.clear()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
        if self._error is not None:
            raise self._error

    async def persist(self) -> None:
        await self.writer.write(self.state.visited, self.started_at)

    async def _worker(self, queue: asyncio.Queue[CrawlItem], found: List[CrawlItem]) -> None:
        while True:
            item = await queue.get()
            try:
                # after a failed write the remaining items are only drained
                if self._error is None:
                    found.extend(await self.visit(item))
            except PersistenceError as exc:
                self._error = exc
            except Exception:
                logger.exception("Unexpected error while crawling %s", item.url)
            finally:
                queue.task_done()

    async def visit(self, item: CrawlItem) -> List[CrawlItem]:
        """Обходит одну страницу и возвращает её ссылки уровнем глубже."""
        url = normalize_url(item.url)
        if (
            url is None
            or self.state.is_visited(url)
            or not in_scope(url, item.root)
            or item.depth > self.config.max_depth
            or not self.state.claim(url)
        ):
            return []

        logger.info("Crawling (depth: %d): %s", item.depth, url)
        await self.persist()

        page = await self.fetcher.fetch(url)
        if page is None:
            self.failed.append(url)
            return []

        links = self.select_links(extract_links(page, scan_raw=self.config.scan_raw_content), item.root)
        logger.info("Found %d new links on %s", len(links), url)
        return [CrawlItem(link, item.root, item.depth + 1) for link in sorted(links)]

    def select_links(self, links: ExtractedLinks, root: str) -> Set[str]:
        selected: Set[str] = set()
        for raw in links.all():
            if "#" in raw:
                continue
            url = normalize_url(raw)
            if (
                url is None
                or not in_scope(url, root)
                or not is_page_url(url)
                or self.state.is_visited(url)
            ):
                continue
            selected.add(url)
        return selected
