"""
Models package initialization
"""

from webcrawler.models.crawl import CrawlStats, CrawlStatus, EngineState
from webcrawler.models.page import ExtractedPage, PageRecord

__all__ = [
    "CrawlStats",
    "CrawlStatus",
    "EngineState",
    "ExtractedPage",
    "PageRecord",
]
