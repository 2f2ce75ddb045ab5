# sitemap_scout/crawler/models.py
"""
Data models for the SitemapScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple, Optional, Set


@dataclass(slots=True)
class PageData:
    """Holds the resolved URL and markup of a fetched page."""

    url: str
    content: str


class CrawlItem(NamedTuple):
    """One unit of work: a URL, the root that scopes it and its hop count."""

    url: str
    root: str
    depth: int


@dataclass(slots=True)
class CrawlState:
    """Visited set of one crawl run.

    Every claimed URL is also discovered, so the same set feeds the sitemap.
    """

    max_pages: Optional[int] = None
    visited: Set[str] = field(default_factory=set)

    def is_visited(self, url: str) -> bool:
        return url in self.visited

    @property
    def exhausted(self) -> bool:
        return self.max_pages is not None and len(self.visited) >= self.max_pages

    def claim(self, url: str) -> bool:
        """Mark *url* visited; False if it already was or the page cap is hit.

        Contains no ``await``, so concurrent workers on one event loop can
        never both claim the same URL.
        """
        if url in self.visited or self.exhausted:
            return False
        self.visited.add(url)
        return True


@dataclass(slots=True)
class RunReport:
    """Summary of a finished crawl run."""

    started_at: datetime
    finished_at: datetime
    urls: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.urls)

    @property
    def duration(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def as_dict(self) -> dict[str, object]:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "duration": round(self.duration, 3),
            "count": self.count,
            "urls": list(self.urls),
            "failed": list(self.failed),
        }
