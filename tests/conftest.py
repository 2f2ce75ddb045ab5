# File: tests/conftest.py
import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
from aiohttp import web

from sitemap_scout.config import SitemapConfig
from sitemap_scout.crawler.fetcher import BaseFetcher
from sitemap_scout.crawler.models import PageData


class FakeFetcher(BaseFetcher):
    """
    In-memory fetch backend: maps normalized URLs to HTML.
    Missing URLs behave like failed fetches.
    """

    def __init__(
        self,
        config: SitemapConfig,
        pages: Dict[str, str],
        delay: float = 0.0,
        errors: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        super().__init__(config)
        self.pages = pages
        self.delay = delay
        self.errors = errors or {}
        self.delays = delays or {}
        self.calls: List[str] = []
        self.opened = False
        self.closed = False

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    async def fetch(self, url: str) -> Optional[PageData]:
        self.calls.append(url)
        delay = self.delays.get(url, self.delay)
        if delay:
            await asyncio.sleep(delay)
        if url in self.errors:
            raise self.errors[url]
        html = self.pages.get(url)
        return PageData(url, html) if html is not None else None


def links(*hrefs: str) -> str:
    """Build a page body linking to *hrefs*."""
    return "<html><body>" + "".join(f'<a href="{h}">link</a>' for h in hrefs) + "</body></html>"


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., SitemapConfig]:
    """
    Factory for SitemapConfig writing its sitemap under tmp_path.
    """

    def _make(subdomains=("https://a.test",), **overrides) -> SitemapConfig:
        data = {
            "subdomains": list(subdomains),
            "timeout": 2.0,
            "user_agent": "TestAgent/1.0",
            "output_path": tmp_path / "public" / "sitemap.xml",
        }
        data.update(overrides)
        return SitemapConfig(**data)

    return _make


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
