"""
Crawl Pipeline Tasks

Per-URL unit of work: fetch, extract, persist, discover, re-enqueue.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Protocol

import aiohttp

from webcrawler.core.errors import ExtractionError, FetchError, StoreError
from webcrawler.core.utils import canonicalize
from webcrawler.db.frontier import Frontier
from webcrawler.db.visited import VisitedSet
from webcrawler.models.crawl import CrawlStats
from webcrawler.models.page import ExtractedPage, PageRecord
from webcrawler.scheduler import Slot
from webcrawler.utils.parser import extract_page

logger = logging.getLogger(__name__)

# Maximum response size (10 MB)
MAX_RESPONSE_SIZE = 10 * 1024 * 1024

# Streaming read chunk size
READ_CHUNK_SIZE = 64 * 1024

Fetch = Callable[[str], Awaitable[str]]
Extract = Callable[[str], ExtractedPage]


class PageWriter(Protocol):
    def upsert(self, record: PageRecord) -> None: ...


@dataclass
class CrawlContext:
    """Shared state and collaborators handed to every pipeline."""

    frontier: Frontier
    visited: VisitedSet
    store: PageWriter
    fetch: Fetch
    extract: Extract = extract_page
    stats: CrawlStats = field(default_factory=CrawlStats)

    def admit(self, url: str) -> bool:
        """Enqueue url if this is its first admission. Returns True if enqueued."""
        if not self.visited.try_admit(url):
            return False
        self.frontier.push_back(url)
        return True


async def fetch_page(
    session: aiohttp.ClientSession,
    url: str,
    timeout: float,
    max_bytes: int = MAX_RESPONSE_SIZE,
) -> str:
    """
    Fetch a page body as text.

    Raises:
        FetchError: On network error, timeout, non-2xx status or oversized body
    """
    try:
        async with session.get(
            url, timeout=aiohttp.ClientTimeout(total=timeout), allow_redirects=True
        ) as resp:
            if not 200 <= resp.status < 300:
                raise FetchError(url, f"HTTP {resp.status}", status_code=resp.status)

            # Check Content-Length if available
            content_length = resp.headers.get("Content-Length")
            if content_length:
                try:
                    if int(content_length) > max_bytes:
                        raise FetchError(
                            url,
                            f"Response too large ({content_length} bytes)",
                            status_code=resp.status,
                        )
                except ValueError:
                    pass

            chunks = []
            size = 0
            async for chunk in resp.content.iter_chunked(READ_CHUNK_SIZE):
                size += len(chunk)
                if size > max_bytes:
                    raise FetchError(
                        url,
                        f"Response exceeded {max_bytes} bytes",
                        status_code=resp.status,
                    )
                chunks.append(chunk)

            encoding = resp.charset or "utf-8"
            try:
                return b"".join(chunks).decode(encoding, errors="replace")
            except LookupError:
                return b"".join(chunks).decode("utf-8", errors="replace")

    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchError(url, str(e) or type(e).__name__) from e


async def process_url(ctx: CrawlContext, url: str, slot: Slot) -> None:
    """
    Process a single URL: fetch, extract, persist, enqueue discovered links.

    Must be called holding slot; the slot is released on every exit path.
    A failing URL is logged and dropped without affecting the rest of the crawl.
    """
    try:
        # 1. Fetch HTML
        try:
            html = await ctx.fetch(url)
        except FetchError as e:
            ctx.stats.fetch_failures += 1
            logger.warning(f"Fetch failed for {url}: {e.reason}")
            return
        ctx.stats.pages_fetched += 1

        # 2. Extract metadata and links (offload to executor)
        loop = asyncio.get_running_loop()
        try:
            page = await loop.run_in_executor(None, ctx.extract, html)
        except ExtractionError as e:
            ctx.stats.extraction_failures += 1
            logger.warning(f"Extraction failed for {url}: {e.reason}")
            page = ExtractedPage()
        except Exception as e:
            # Any extractor failure still yields a stored (empty) record
            ctx.stats.extraction_failures += 1
            logger.warning(f"Extraction failed for {url}: {e!r}", exc_info=True)
            page = ExtractedPage()

        # 3. Persist page record
        record = PageRecord(url=url, title=page.title, description=page.description)
        try:
            await loop.run_in_executor(None, ctx.store.upsert, record)
            ctx.stats.pages_stored += 1
        except StoreError as e:
            ctx.stats.store_failures += 1
            logger.error(f"❌ {e}")

        # 4. Canonicalize & admit discovered links
        admitted = 0
        for href in page.hrefs:
            link = canonicalize(href, url)
            if link is None:
                continue
            ctx.stats.links_found += 1
            if ctx.admit(link):
                admitted += 1
                logger.debug(f"Enqueued {link}")
        ctx.stats.links_admitted += admitted

        logger.info(f"Crawled {url} ({len(page.hrefs)} links, {admitted} new)")

    except Exception as e:
        logger.error(f"Unexpected error processing {url}: {e}", exc_info=True)

    finally:
        # 5. Always give the slot back
        slot.release()
