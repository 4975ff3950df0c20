import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.robotparser import RobotFileParser


@dataclass(frozen=True)
class _RulesCacheEntry:
    parser: RobotFileParser
    stored_at: float


class RobotsCache:
    """
    Cache of parsed exclusion rules keyed by site base URL (scheme://host).

    Bounded by `max_size` (LRU eviction) and `ttl_seconds` (stale entries are
    treated as missing). Not thread-safe on its own; `RobotsService` guards it.
    """

    def __init__(self, *, max_size: int = 2048, ttl_seconds: int = 3600, clock: Callable[[], float] = time.monotonic):
        self._max_size = int(max_size) if max_size is not None else 2048
        if self._max_size <= 0:
            self._max_size = 1

        self._ttl_seconds = int(ttl_seconds) if ttl_seconds is not None else 3600
        if self._ttl_seconds <= 0:
            # Non-positive TTL means "don't cache": entries expire immediately.
            self._ttl_seconds = 0

        self._clock = clock
        self._cache: "OrderedDict[str, _RulesCacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._cache)

    def _is_expired(self, entry: _RulesCacheEntry) -> bool:
        if self._ttl_seconds == 0:
            return True
        return (self._clock() - entry.stored_at) > self._ttl_seconds

    def _evict_if_needed(self) -> None:
        while len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def get(self, base_url: str) -> Optional[RobotFileParser]:
        """Return the cached rules for a site, or None on a miss."""
        entry = self._cache.get(base_url)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._cache[base_url]
            return None
        self._cache.move_to_end(base_url)
        return entry.parser

    def set(self, base_url: str, parser: RobotFileParser) -> None:
        self._cache[base_url] = _RulesCacheEntry(parser=parser, stored_at=self._clock())
        self._cache.move_to_end(base_url)
        self._evict_if_needed()

    def clear(self) -> None:
        self._cache.clear()
