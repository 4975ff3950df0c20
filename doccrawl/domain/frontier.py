from collections import deque
from typing import Deque, Optional, Set, Tuple

from doccrawl.utils.url_utils import normalize_url


class CrawlFrontier:
    """FIFO frontier plus visited/discovered sets for a single crawl.

    Owned by exactly one crawl loop; never shared between threads.

    A URL is queued at most once (first discovery wins, which under FIFO order
    is also its shallowest depth) and fetched at most once.
    """

    def __init__(self, start_url: str):
        self._queue: Deque[Tuple[str, int]] = deque()
        self._discovered: Set[str] = set()
        self._visited: Set[str] = set()
        self.push(start_url, 0)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def push(self, url: str, depth: int) -> bool:
        key = normalize_url(url)
        if key in self._discovered or key in self._visited:
            return False
        self._discovered.add(key)
        self._queue.append((url, depth))
        return True

    def pop(self) -> Optional[Tuple[str, int]]:
        if not self._queue:
            return None
        return self._queue.popleft()

    def mark_visited(self, url: str) -> None:
        self._visited.add(normalize_url(url))

    def is_visited(self, url: str) -> bool:
        return normalize_url(url) in self._visited

    def pending(self) -> list:
        return list(self._queue)

    def clear(self) -> None:
        self._queue.clear()
