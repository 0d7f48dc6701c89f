"""
Crawl Status Models

Engine state, running counters and the status snapshot reported by the engine.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class EngineState(str, Enum):
    """Crawl engine lifecycle"""

    IDLE = "idle"
    SEEDING = "seeding"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"


@dataclass
class CrawlStats:
    """Counters collected by worker pipelines during a crawl."""

    pages_fetched: int = 0
    fetch_failures: int = 0
    extraction_failures: int = 0
    pages_stored: int = 0
    store_failures: int = 0
    links_found: int = 0
    links_admitted: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class CrawlStatus(BaseModel):
    """Crawl engine status information"""

    state: EngineState = Field(..., description="Current engine state")
    seed_url: str = Field(..., description="Canonical seed URL")
    frontier_size: int = Field(default=0, ge=0, description="URLs waiting to be fetched")
    visited_count: int = Field(
        default=0, ge=0, description="URLs admitted to the frontier so far"
    )
    in_flight: int = Field(default=0, ge=0, description="Pipelines currently running")
    max_concurrent: int = Field(..., ge=1, description="Concurrency limit")

    pages_fetched: int = Field(default=0, ge=0)
    fetch_failures: int = Field(default=0, ge=0)
    extraction_failures: int = Field(default=0, ge=0)
    pages_stored: int = Field(default=0, ge=0)
    store_failures: int = Field(default=0, ge=0)
    links_found: int = Field(default=0, ge=0)
    links_admitted: int = Field(default=0, ge=0)

    started_at: datetime | None = Field(
        default=None, description="Timestamp when the crawl started"
    )
    finished_at: datetime | None = Field(
        default=None, description="Timestamp when the crawl reached done"
    )
    duration_seconds: float | None = Field(
        default=None, ge=0, description="Elapsed crawl time in seconds"
    )
