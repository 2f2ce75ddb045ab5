# sitemap_scout/crawler/link_extractor.py
"""
Link extraction for SitemapScout.

Links are reported per channel so callers can tell structural links from
guesses:

* ``structural`` – ``href`` attributes and ``data-href``/``data-url``/``data-link``.
* ``scripted``   – URLs inside inline ``<script>`` bodies and ``on*`` handlers.
* ``scraped``    – same-host URL literals found anywhere in the raw content
  (JSON blobs of single-page apps and the like). Low confidence, noisy.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Set
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from sitemap_scout.crawler.models import PageData
from sitemap_scout.logger import logger

__all__ = ("ExtractedLinks", "extract_links")

_DATA_ATTRS = ("data-href", "data-url", "data-link")
_SKIP_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")

_ABSOLUTE_URL_RE = re.compile(r"""https?://[^\s"'<>()\[\]{}\\]+""", re.IGNORECASE)
_SCRIPT_TARGET_RE = re.compile(
    r"""(?:location(?:\.href)?\s*=|location\.(?:assign|replace)\s*\(|window\.open\s*\()\s*(["'])(?P<target>[^"']+)\1"""
)
_RAW_TERMINATORS = r"""[^\s"')\]}<>]*"""


@dataclass(slots=True)
class ExtractedLinks:
    """Absolute URL candidates found on one page, grouped by channel."""

    structural: Set[str] = field(default_factory=set)
    scripted: Set[str] = field(default_factory=set)
    scraped: Set[str] = field(default_factory=set)

    def all(self) -> Set[str]:
        return self.structural | self.scripted | self.scraped

    def __len__(self) -> int:
        return len(self.all())


def _resolve(base: str, href: Optional[str]) -> Optional[str]:
    if not isinstance(href, str):
        return None
    raw = href.strip()
    if not raw or raw.lower().startswith(_SKIP_SCHEMES):
        return None
    try:
        return urljoin(base, raw)
    except ValueError:
        return None


def _add(target: Set[str], urls: Iterable[Optional[str]]) -> None:
    target.update(u for u in urls if u)


def _structural(soup: BeautifulSoup, base: str) -> Set[str]:
    found: Set[str] = set()
    for tag in soup.find_all("a", href=True):
        if isinstance(tag, Tag):
            _add(found, [_resolve(base, tag.get("href"))])
    # <area>, <link> and friends only count with an absolute URL
    for tag in soup.find_all(href=True):
        if not isinstance(tag, Tag) or tag.name == "a":
            continue
        href = tag.get("href")
        if isinstance(href, str) and href.strip().lower().startswith("http"):
            _add(found, [_resolve(base, href)])
    for name in _DATA_ATTRS:
        for tag in soup.find_all(attrs={name: True}):
            if isinstance(tag, Tag):
                _add(found, [_resolve(base, tag.get(name))])
    return found


def _scripted(soup: BeautifulSoup, base: str) -> Set[str]:
    chunks: list[str] = []
    for script in soup.find_all("script"):
        if isinstance(script, Tag) and not script.get("src"):
            chunks.append(script.get_text())
    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        for attr, value in tag.attrs.items():
            if attr.lower().startswith("on") and isinstance(value, str):
                chunks.append(value)

    found: Set[str] = set()
    for text in chunks:
        _add(found, (m.group(0) for m in _ABSOLUTE_URL_RE.finditer(text)))
        _add(found, (_resolve(base, m.group("target")) for m in _SCRIPT_TARGET_RE.finditer(text)))
    return found


def _scraped(content: str, base: str) -> Set[str]:
    netloc = urlsplit(base).netloc
    if not netloc:
        return set()
    bare = netloc[4:] if netloc.lower().startswith("www.") else netloc
    pattern = re.compile(rf"https?://(?:www\.)?{re.escape(bare)}{_RAW_TERMINATORS}", re.IGNORECASE)
    return set(pattern.findall(content))


def extract_links(page: PageData, *, scan_raw: bool = True) -> ExtractedLinks:
    """
    Extract candidate absolute URLs from a fetched page.

    Unparseable markup yields no links at all. Nothing here filters by
    scope, depth or visited state.
    """
    links = ExtractedLinks()
    try:
        soup = BeautifulSoup(page.content, "html.parser")
    except ParserRejectedMarkup as exc:
        logger.warning("Could not parse markup of %s: %s", page.url, exc)
        return links
    links.structural = _structural(soup, page.url)
    links.scripted = _scripted(soup, page.url)
    if scan_raw:
        links.scraped = _scraped(page.content, page.url)
    logger.debug(
        "Extracted from %s: %d structural, %d scripted, %d scraped",
        page.url,
        len(links.structural),
        len(links.scripted),
        len(links.scraped),
    )
    return links
