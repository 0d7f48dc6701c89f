"""
Crawler Errors

Fatal configuration errors and the per-URL failures a crawl survives.
"""


class CrawlerError(Exception):
    """Base class for crawler errors"""


class ConfigError(CrawlerError):
    """Invalid seed URL or settings. Fatal before crawling starts."""


class FetchError(CrawlerError):
    """Network failure, timeout or non-success status for a single URL."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Fetch failed for {url}: {reason}")


class ExtractionError(CrawlerError):
    """Page markup could not be parsed. Treated as no metadata and no links."""

    def __init__(self, url: str | None, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Extraction failed for {url or '<document>'}: {reason}")


class StoreError(CrawlerError):
    """Persisting a page record failed."""

    def __init__(self, url: str | None, reason: str):
        self.url = url
        self.reason = reason
        if url:
            super().__init__(f"Store failed for {url}: {reason}")
        else:
            super().__init__(f"Store failed: {reason}")
