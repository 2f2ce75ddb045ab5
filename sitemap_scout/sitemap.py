# File: sitemap_scout/sitemap.py
"""sitemap_scout.sitemap: Сборка, разбор и атомарная запись sitemap.xml."""

from __future__ import annotations

import asyncio
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Union

from lxml import etree

from sitemap_scout.logger import logger

__all__ = [
    "SITEMAP_NS",
    "PersistenceError",
    "SitemapWriter",
    "format_lastmod",
    "parse_sitemap",
    "render_sitemap",
]

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


class PersistenceError(RuntimeError):
    """The sitemap file could not be written."""


def _tag(name: str) -> str:
    return f"{{{SITEMAP_NS}}}{name}"


def format_lastmod(now: datetime) -> str:
    """ISO-8601 в UTC с миллисекундами: ``2024-01-02T03:04:05.678Z``."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def render_sitemap(urls: Iterable[str], now: datetime) -> bytes:
    """Строит документ urlset: записи отсортированы, lastmod одинаковый у всех.

    Чистая функция: одинаковые входные данные дают побайтно одинаковый результат.
    """
    lastmod = format_lastmod(now)
    urlset = etree.Element(_tag("urlset"), nsmap={None: SITEMAP_NS})
    for url in sorted(set(urls)):
        entry = etree.SubElement(urlset, _tag("url"))
        etree.SubElement(entry, _tag("loc")).text = url
        etree.SubElement(entry, _tag("lastmod")).text = lastmod
    return etree.tostring(urlset, xml_declaration=True, encoding="UTF-8", pretty_print=True)


def parse_sitemap(xml_content: Union[str, bytes]) -> List[str]:
    """Разбирает sitemap и возвращает список URL из тегов <loc>.

    Пример:
    ```python
    from sitemap_scout.sitemap import parse_sitemap

    urls = parse_sitemap(Path("public/sitemap.xml").read_bytes())
    ```
    """
    if isinstance(xml_content, str):
        xml_content = xml_content.encode("utf-8")
    if not xml_content.strip():
        return []
    parser = etree.XMLParser(ns_clean=True, recover=True)
    root = etree.fromstring(xml_content, parser=parser)
    if root is None:
        return []
    locs = root.findall(".//{*}loc")
    return [loc.text.strip() for loc in locs if loc.text]


class SitemapWriter:
    """Пишет sitemap по фиксированному пути: temp-файл + os.replace.

    Записи сериализуются замком и выполняются в отдельном потоке, поэтому
    файл на диске всегда либо предыдущая, либо новая полная версия, а
    цикл событий не ждёт fsync.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self.writes = 0

    async def write(self, urls: Iterable[str], now: datetime) -> Path:
        try:
            document = render_sitemap(list(urls), now)
        except ValueError as exc:
            logger.error("Cannot render sitemap %s: %s", self.path, exc)
            raise PersistenceError(f"Cannot render sitemap for {self.path}: {exc}") from exc
        async with self._lock:
            try:
                # disk I/O off the loop; in-flight fetches keep their timeouts
                await asyncio.to_thread(self._replace, document)
            except OSError as exc:
                logger.error("Failed to write sitemap %s: %s", self.path, exc)
                raise PersistenceError(f"Cannot write sitemap to {self.path}: {exc}") from exc
            self.writes += 1
        return self.path

    def _replace(self, document: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(document)
                fh.flush()
                os.fsync(fh.fileno())
            # mkstemp creates 0600 files; the sitemap is public
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
