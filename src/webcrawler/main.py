"""
Main Entry Point

Command-line crawler: takes a seed URL, crawls until the frontier drains,
and exits 0. An invalid seed exits 2, an unusable page store exits 1.
"""

import argparse
import asyncio
import logging
import signal
import sys

from webcrawler.core.config import settings, validate_settings
from webcrawler.core.errors import ConfigError, StoreError
from webcrawler.core.utils import validate_seed
from webcrawler.db.page_store import PageStore
from webcrawler.models.crawl import CrawlStatus
from webcrawler.workers.engine import CrawlEngine

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STORE_ERROR = 1
EXIT_CONFIG_ERROR = 2

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="webcrawler", description="Breadth-first web crawler"
    )
    parser.add_argument(
        "seed",
        nargs="?",
        default=settings.CRAWL_SEED_URL,
        help="Seed URL to start crawling from (default: $CRAWL_SEED_URL)",
    )
    return parser.parse_args(argv)


def _install_signal_handlers(engine: CrawlEngine) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, engine.stop)
        except NotImplementedError:
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(engine.stop))


async def crawl(seed_url: str) -> CrawlStatus:
    """Build the page store and engine, then crawl until done or stopped."""
    # Validate the seed before touching the database
    seed = validate_seed(seed_url)
    if seed is None:
        raise ConfigError(f"Invalid seed URL: {seed_url!r}")

    store = PageStore(settings.CRAWLER_DB_PATH)
    engine = CrawlEngine(
        seed,
        store,
        concurrency=settings.CRAWL_CONCURRENCY,
        timeout=settings.CRAWL_TIMEOUT_SEC,
        poll_interval=settings.CRAWL_POLL_INTERVAL_SEC,
        user_agent=settings.CRAWL_USER_AGENT,
    )
    _install_signal_handlers(engine)
    return await engine.run()


def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)

    try:
        validate_settings(settings)
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"❌ {e}")
        return EXIT_CONFIG_ERROR

    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)

    try:
        status = asyncio.run(crawl(args.seed))
    except ConfigError as e:
        logger.error(f"❌ {e}")
        return EXIT_CONFIG_ERROR
    except StoreError as e:
        logger.error(f"❌ {e}")
        return EXIT_STORE_ERROR

    logger.info(f"Summary: {status.model_dump_json()}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
