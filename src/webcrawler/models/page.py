"""
Page Models

Records produced by the extraction step and written to the page store.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PageRecord:
    url: str
    title: str | None = None
    description: str | None = None


@dataclass
class ExtractedPage:
    title: str | None = None
    description: str | None = None
    hrefs: list[str] = field(default_factory=list)
