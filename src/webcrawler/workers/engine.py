"""
Crawl Engine

Owns the frontier, visited set and concurrency controller, runs the
admission loop and decides when the crawl is finished.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, UTC
from functools import partial
from typing import AsyncIterator

import aiohttp

from webcrawler.core.config import settings
from webcrawler.core.errors import ConfigError
from webcrawler.core.utils import validate_seed
from webcrawler.db.frontier import Frontier
from webcrawler.db.visited import VisitedSet
from webcrawler.models.crawl import CrawlStats, CrawlStatus, EngineState
from webcrawler.scheduler import ConcurrencyController, Slot
from webcrawler.utils.parser import extract_page
from webcrawler.workers.tasks import (
    CrawlContext,
    Extract,
    Fetch,
    PageWriter,
    fetch_page,
    process_url,
)

logger = logging.getLogger(__name__)


class CrawlEngine:
    """
    Breadth-first crawl driver.

    State machine: idle -> seeding -> running -> draining -> done.

    The crawl is finished when the frontier is empty and no pipeline is in
    flight, observed together with no suspension point in between. Pipelines
    enqueue their links before releasing their slot, so a zero in-flight count
    means no link is still on its way to the frontier.
    """

    def __init__(
        self,
        seed_url: str,
        store: PageWriter,
        *,
        fetch: Fetch | None = None,
        extract: Extract = extract_page,
        concurrency: int = settings.CRAWL_CONCURRENCY,
        timeout: float = settings.CRAWL_TIMEOUT_SEC,
        poll_interval: float = settings.CRAWL_POLL_INTERVAL_SEC,
        user_agent: str = settings.CRAWL_USER_AGENT,
    ):
        canonical = validate_seed(seed_url)
        if canonical is None:
            raise ConfigError(f"Invalid seed URL: {seed_url!r}")

        self.seed_url = canonical
        self.store = store
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.user_agent = user_agent

        self.frontier = Frontier()
        self.visited = VisitedSet()
        self.controller = ConcurrencyController(concurrency)
        self.stats = CrawlStats()

        self.state = EngineState.IDLE
        self.started_at: datetime | None = None
        self.finished_at: datetime | None = None

        self._fetch = fetch
        self._extract = extract
        self._tasks: set[asyncio.Task] = set()
        self._stop_requested = False
        self._wakeup = asyncio.Event()

    @asynccontextmanager
    async def _fetcher(self) -> AsyncIterator[Fetch]:
        """Yield the fetch collaborator, opening an HTTP session if none was given."""
        if self._fetch is not None:
            yield self._fetch
            return

        connector = aiohttp.TCPConnector(
            limit=self.controller.max_concurrent,
            ttl_dns_cache=300,
            enable_cleanup_closed=True,
        )
        async with aiohttp.ClientSession(
            headers={"User-Agent": self.user_agent}, connector=connector
        ) as session:
            yield partial(fetch_page, session, timeout=self.timeout)

    def stop(self) -> None:
        """Request a graceful shutdown: spawn nothing new, let in-flight work finish."""
        if self._stop_requested:
            return
        logger.info("Stop requested, draining in-flight pipelines...")
        self._stop_requested = True
        self._wakeup.set()

    def is_quiescent(self) -> bool:
        """True when no URL is queued and no pipeline is in flight."""
        return self.frontier.is_empty() and self.controller.in_flight_count() == 0

    async def run(self) -> CrawlStatus:
        """Crawl from the seed until quiescence (or stop()) and return the final status."""
        if self.state != EngineState.IDLE:
            raise RuntimeError("Crawl engine has already been started")

        self.started_at = datetime.now(UTC)

        # Seeding
        self.state = EngineState.SEEDING
        async with self._fetcher() as fetch:
            ctx = CrawlContext(
                frontier=self.frontier,
                visited=self.visited,
                store=self.store,
                fetch=fetch,
                extract=self._extract,
                stats=self.stats,
            )
            ctx.admit(self.seed_url)
            logger.info(
                f"🚀 Crawl started at {self.seed_url} "
                f"(concurrency={self.controller.max_concurrent})"
            )

            self.state = EngineState.RUNNING
            try:
                await self._admission_loop(ctx)
            finally:
                # Draining
                self.state = EngineState.DRAINING
                if self._tasks:
                    logger.info(f"Waiting for {len(self._tasks)} in-flight pipelines")
                    await asyncio.gather(*self._tasks, return_exceptions=True)

        dropped = len(self.frontier)
        if dropped:
            logger.info(f"Stopped with {dropped} URLs left in the frontier")

        self.state = EngineState.DONE
        self.finished_at = datetime.now(UTC)
        status = self.status()
        logger.info(
            f"✅ Crawl finished: {status.pages_fetched} fetched, "
            f"{status.fetch_failures} failed, {status.visited_count} URLs seen "
            f"in {status.duration_seconds:.1f}s"
        )
        return status

    async def _admission_loop(self, ctx: CrawlContext) -> None:
        while not self._stop_requested:
            url = self.frontier.pop_front()

            if url is None:
                # No await between the pop and this check: no pipeline can
                # enqueue or finish in between.
                if self.is_quiescent():
                    logger.debug("Frontier empty and nothing in flight")
                    return
                await self._wait_for_progress()
                continue

            slot = await self.controller.acquire()
            if self._stop_requested:
                slot.release()
                # Keep the dequeued URL in the dropped-count report
                self.frontier.push_back(url)
                return

            task = asyncio.create_task(self._run_pipeline(ctx, url, slot))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run_pipeline(self, ctx: CrawlContext, url: str, slot: Slot) -> None:
        try:
            await process_url(ctx, url, slot)
        finally:
            self._wakeup.set()

    async def _wait_for_progress(self) -> None:
        """Sleep until a pipeline finishes, stop() is called, or poll_interval elapses."""
        self._wakeup.clear()
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=self.poll_interval)
        except asyncio.TimeoutError:
            pass

    def status(self) -> CrawlStatus:
        """Snapshot of the engine state and crawl counters."""
        duration = None
        if self.started_at is not None:
            end = self.finished_at or datetime.now(UTC)
            duration = (end - self.started_at).total_seconds()

        return CrawlStatus(
            state=self.state,
            seed_url=self.seed_url,
            frontier_size=len(self.frontier),
            visited_count=len(self.visited),
            in_flight=self.controller.in_flight_count(),
            max_concurrent=self.controller.max_concurrent,
            started_at=self.started_at,
            finished_at=self.finished_at,
            duration_seconds=duration,
            **self.stats.as_dict(),
        )
