"""
Crawler Storage Layer

Provides Frontier (pending URLs), VisitedSet (admitted URLs) and
PageStore (crawled page metadata).
"""

from webcrawler.db.frontier import Frontier
from webcrawler.db.page_store import PageStore
from webcrawler.db.visited import VisitedSet

__all__ = ["Frontier", "PageStore", "VisitedSet"]
