"""
Frontier - Pending URL Queue

In-memory FIFO of canonical URLs that have been admitted but not yet crawled.
"""

import threading
from collections import deque
from typing import Optional


class Frontier:
    """
    Pending URL queue.

    Every operation takes the lock for its whole duration, so concurrent
    callers (tasks or threads) see each push/pop as a single step. Popping an
    empty frontier returns None; waiting for work is the engine's job.
    """

    def __init__(self):
        self._queue: deque[str] = deque()
        self._lock = threading.Lock()

    def push_back(self, url: str) -> None:
        """Append a URL to the end of the queue."""
        with self._lock:
            self._queue.append(url)

    def pop_front(self) -> Optional[str]:
        """Remove and return the oldest URL, or None if empty."""
        with self._lock:
            if not self._queue:
                return None
            return self._queue.popleft()

    def is_empty(self) -> bool:
        with self._lock:
            return not self._queue

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)
