"""Crawl engine: fetch backends, link extraction and per-run traversal."""
from sitemap_scout.crawler.crawler import CrawlRun
from sitemap_scout.crawler.models import CrawlItem, CrawlState, PageData, RunReport

__all__ = ["CrawlRun", "CrawlItem", "CrawlState", "PageData", "RunReport"]
