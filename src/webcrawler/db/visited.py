"""
Visited Set - URL Admission

Tracks every URL ever admitted to the frontier during a crawl.
"""

import threading


class VisitedSet:
    """
    At-most-once admission authority.

    A URL is recorded when it is accepted into the frontier, not when it is
    fetched. Membership never shrinks, including for URLs whose fetch failed.
    """

    def __init__(self):
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def try_admit(self, url: str) -> bool:
        """
        Record url if it is new.

        Returns:
            True if this call inserted the URL, False if it was already present
        """
        with self._lock:
            if url in self._seen:
                return False
            self._seen.add(url)
            return True

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
