# sitemap_scout/crawler/renderer.py
"""
Browser backend: renders pages in headless Chromium through Playwright so
that links generated by client-side scripts reach the extractor.
"""
from __future__ import annotations

from typing import Optional

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from sitemap_scout.config import SitemapConfig
from sitemap_scout.crawler.fetcher import BaseFetcher, is_html
from sitemap_scout.crawler.models import PageData
from sitemap_scout.logger import logger

_LAUNCH_ARGS = ["--disable-gpu", "--no-sandbox", "--disable-dev-shm-usage"]
# extra wait for client-side hydration, capped so one page cannot stall a run
_IDLE_WAIT_MS = 5000


class BrowserFetcher(BaseFetcher):
    """One browser and one context per engine lifetime, one tab per fetch."""

    def __init__(self, config: SitemapConfig) -> None:
        super().__init__(config)
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def open(self) -> None:
        if self._context is not None:
            return
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=True, args=_LAUNCH_ARGS)
        self._context = await self._browser.new_context(user_agent=self.config.user_agent)
        logger.info("Headless browser started")

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Headless browser closed")

    async def fetch(self, url: str) -> Optional[PageData]:
        if self._context is None:
            raise RuntimeError("Browser not initialized")
        timeout_ms = self.config.timeout * 1000
        page = await self._context.new_page()
        try:
            response = await page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
            if response is None or not response.ok:
                status = response.status if response else "no response"
                logger.warning("Skipping %s: Status %s", url, status)
                return None
            if not is_html(response.headers.get("content-type")):
                logger.warning("Skipping %s: Not HTML", url)
                return None
            try:
                await page.wait_for_load_state("networkidle", timeout=min(timeout_ms, _IDLE_WAIT_MS))
            except PlaywrightTimeout:
                logger.debug("Network never went idle on %s, using current DOM", url)
            return PageData(page.url, await page.content())
        except PlaywrightTimeout:
            logger.warning("Timeout crawling %s", url)
        except PlaywrightError as exc:
            logger.warning("Error crawling %s: %s", url, exc)
        finally:
            await page.close()
        return None
