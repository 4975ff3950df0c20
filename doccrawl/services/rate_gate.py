import logging
import threading
import time
from typing import Callable, Dict, Optional

from doccrawl.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)


class RateGate:
    """Per-host minimum spacing between requests.

    Process-local and owned by one engine instance; every crawl of that engine
    shares it, so a burst of crawls against one host still gets one request
    per interval. The next slot is reserved under the lock and the caller
    sleeps outside it, which lets requests to other hosts proceed meanwhile.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        max_wait: Optional[float] = None,
    ):
        self._clock = clock
        self._sleep = sleep
        self._max_wait = max_wait
        self._lock = threading.Lock()
        self._last_request: Dict[str, float] = {}

    def _reserve(self, host: str, min_interval: float) -> float:
        with self._lock:
            now = self._clock()
            last = self._last_request.get(host)
            slot = now if last is None else max(now, last + min_interval)
            wait = slot - now
            if self._max_wait is not None and wait > self._max_wait:
                raise RateLimitExceeded(host, wait)
            self._last_request[host] = slot
            return wait

    def acquire(self, host: str, rate_limit: float) -> float:
        """Block until a request to `host` may be issued; return the time waited."""
        if rate_limit <= 0:
            raise ValueError("rate_limit must be positive")
        wait = self._reserve(host or "", 1.0 / rate_limit)
        if wait > 0:
            logger.debug("Rate gate: waiting %.3fs before next request to %s", wait, host)
            self._sleep(wait)
        return wait

    def last_request_at(self, host: str) -> Optional[float]:
        with self._lock:
            return self._last_request.get(host)
