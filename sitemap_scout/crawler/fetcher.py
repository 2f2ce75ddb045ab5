# sitemap_scout/crawler/fetcher.py
"""
Fetcher module: page retrieval backends sharing one small async interface.

A fetcher is an async context manager owning its network resource for the
engine's lifetime; ``fetch`` returns :class:`PageData` for an HTML page and
``None`` for any failure (logged, never raised, never retried).
"""
from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Optional, Type

from aiohttp import ClientError, ClientSession, ClientTimeout

from sitemap_scout.config import SitemapConfig
from sitemap_scout.crawler.models import PageData
from sitemap_scout.logger import logger

HTML_TYPES = ("text/html", "application/xhtml+xml")


def is_html(content_type: Optional[str]) -> bool:
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    return mime in HTML_TYPES


class BaseFetcher:
    """Common lifecycle for fetch backends."""

    def __init__(self, config: SitemapConfig) -> None:
        self.config = config

    async def __aenter__(self) -> BaseFetcher:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def open(self) -> None:
        """Acquire the underlying resource."""

    async def close(self) -> None:
        """Release the underlying resource; safe to call twice."""

    async def fetch(self, url: str) -> Optional[PageData]:
        raise NotImplementedError


class HttpFetcher(BaseFetcher):
    """Static backend: plain GET through one shared aiohttp session."""

    def __init__(self, config: SitemapConfig) -> None:
        super().__init__(config)
        self.session: Optional[ClientSession] = None

    async def open(self) -> None:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def fetch(self, url: str) -> Optional[PageData]:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning("Skipping %s: Status %s", url, resp.status)
                    return None
                if not is_html(resp.headers.get("Content-Type")):
                    logger.warning("Skipping %s: Not HTML", url)
                    return None
                text = await resp.text(errors="replace")
                return PageData(str(resp.url), text)
        except asyncio.TimeoutError:
            logger.warning("Timeout crawling %s", url)
        except ClientError as exc:
            logger.warning("Error crawling %s: %s", url, exc)
        return None
