"""
Test configuration and fixtures for Crawler tests
"""

import os

# Set ENVIRONMENT before importing any modules that read configuration
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.pop("DATABASE_URL", None)

import asyncio

import pytest

from webcrawler.core.errors import FetchError
from webcrawler.models.page import PageRecord


class MemoryStore:
    """In-memory page store recording every upsert."""

    def __init__(self):
        self.pages: dict[str, PageRecord] = {}
        self.calls: list[str] = []

    def upsert(self, record: PageRecord) -> None:
        self.calls.append(record.url)
        self.pages[record.url] = record


class FakeSite:
    """
    Async fetch collaborator serving pages from a dict.

    URLs missing from pages fail with FetchError (404). Tracks every fetched
    URL and the peak number of concurrent fetches.
    """

    def __init__(self, pages: dict[str, str], delay: float = 0.0):
        self.pages = pages
        self.delay = delay
        self.fetched: list[str] = []
        self.active = 0
        self.peak = 0

    async def __call__(self, url: str) -> str:
        self.fetched.append(url)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url not in self.pages:
                raise FetchError(url, "HTTP 404", status_code=404)
            return self.pages[url]
        finally:
            self.active -= 1


def links_page(*hrefs: str, title: str = "Page") -> str:
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><head><title>{title}</title></head><body>{anchors}</body></html>"


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing"""
    return str(tmp_path / "test_crawler.db")


@pytest.fixture
def test_page_store(temp_db_path):
    """Create a test PageStore instance"""
    from webcrawler.db import PageStore

    return PageStore(temp_db_path)


@pytest.fixture
def memory_store():
    return MemoryStore()
