"""
Crawler Configuration

Settings are read from the environment once, at import. Malformed numbers are
kept as None so that validate_settings can report them as a ConfigError
instead of failing the import.
"""

import logging
import os
from enum import Enum
from pathlib import Path

from webcrawler.core.errors import ConfigError


class Environment(str, Enum):
    """Deployment environment"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


def _number_env(name: str, default: float, cast=int):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        return None


def _data_dir() -> Path:
    """Directory for the default SQLite file: $CRAWLER_DATA_DIR or ./data."""
    return Path(os.getenv("CRAWLER_DATA_DIR") or Path.cwd() / "data")


class CrawlerSettings:
    """Crawler configuration"""

    # Application
    APP_NAME: str = "Web Crawler"
    APP_VERSION: str = "0.1.0"

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", Environment.DEVELOPMENT.value).lower()

    # Page store: PostgreSQL when DATABASE_URL is set, SQLite file otherwise
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    DATA_DIR: Path = _data_dir()
    CRAWLER_DB_PATH: str = os.getenv("CRAWLER_DB_PATH", str(DATA_DIR / "crawler.db"))

    # Crawler Behavior
    CRAWL_SEED_URL: str = os.getenv("CRAWL_SEED_URL", "")
    CRAWL_USER_AGENT: str = os.getenv(
        "CRAWL_USER_AGENT", "WebCrawler/0.1 (+https://example.local/; async crawler)"
    )
    CRAWL_TIMEOUT_SEC: float | None = _number_env("CRAWL_TIMEOUT_SEC", 10, float)
    CRAWL_CONCURRENCY: int | None = _number_env("CRAWL_CONCURRENCY", 100)
    CRAWL_POLL_INTERVAL_SEC: float | None = _number_env(
        "CRAWL_POLL_INTERVAL_SEC", 1.0, float
    )

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = CrawlerSettings()


def validate_settings(settings: CrawlerSettings) -> None:
    """
    Check settings before a crawl starts.

    Raises:
        ConfigError: On an unknown environment or log level, a malformed or
            out-of-range number, or a production setup without DATABASE_URL
    """
    valid_envs = [e.value for e in Environment]
    if settings.ENVIRONMENT not in valid_envs:
        raise ConfigError(
            f"Invalid ENVIRONMENT value: '{settings.ENVIRONMENT}'. "
            f"Must be one of {', '.join(valid_envs)}."
        )

    if settings.LOG_LEVEL not in logging.getLevelNamesMapping():
        raise ConfigError(f"Invalid LOG_LEVEL value: '{settings.LOG_LEVEL}'")

    for name in ("CRAWL_CONCURRENCY", "CRAWL_TIMEOUT_SEC", "CRAWL_POLL_INTERVAL_SEC"):
        if getattr(settings, name) is None:
            raise ConfigError(f"{name} must be a number (got {os.getenv(name)!r})")

    if settings.CRAWL_CONCURRENCY < 1:
        raise ConfigError(
            f"CRAWL_CONCURRENCY must be at least 1 (got {settings.CRAWL_CONCURRENCY})"
        )
    if settings.CRAWL_TIMEOUT_SEC <= 0:
        raise ConfigError(
            f"CRAWL_TIMEOUT_SEC must be positive (got {settings.CRAWL_TIMEOUT_SEC})"
        )
    if settings.CRAWL_POLL_INTERVAL_SEC <= 0:
        raise ConfigError(
            "CRAWL_POLL_INTERVAL_SEC must be positive "
            f"(got {settings.CRAWL_POLL_INTERVAL_SEC})"
        )

    if settings.ENVIRONMENT == Environment.PRODUCTION and not settings.DATABASE_URL:
        raise ConfigError("DATABASE_URL is required in production environment")
