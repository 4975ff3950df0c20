from urllib.parse import urljoin, urlparse
import logging
import threading
from typing import Optional

from doccrawl.exceptions import ExclusionRuleDisallowed
from doccrawl.services.robots_fetcher import RobotsFetcher
from doccrawl.services.robots_cache import RobotsCache

logger = logging.getLogger(__name__)


class RobotsService:
    """
    Answers "may agent A fetch URL U?" from per-site robots.txt rules.

    Orchestrates fetching, caching and permission checks. All crawls share one
    instance; cache access and the first fetch for a site happen under one
    lock, so concurrent crawls of the same site queue behind a single fetch.
    """

    def __init__(self, http_service,
                 robots_fetcher: Optional[RobotsFetcher] = None,
                 cache: Optional[RobotsCache] = None):
        self.http_service = http_service
        self.robots_fetcher = robots_fetcher if robots_fetcher is not None else RobotsFetcher(http_service)
        self.cache = cache if cache is not None else RobotsCache()
        self._lock = threading.Lock()

    def _rules_for(self, base: str, user_agent: str):
        with self._lock:
            rules = self.cache.get(base)
            if rules is None:
                robots_url = urljoin(base, "/robots.txt")
                rules = self.robots_fetcher.fetch(robots_url, user_agent=user_agent)
                self.cache.set(base, rules)
            return rules

    def is_allowed(self, url: str, user_agent: str, robots_enabled: bool = True) -> bool:
        if not robots_enabled:
            return True

        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            # Fail open: invalid/relative URLs should not block crawling.
            return True

        base = f"{parsed.scheme}://{parsed.netloc}"
        rules = self._rules_for(base, user_agent)
        try:
            return rules.can_fetch(user_agent, url)
        except Exception:
            logger.exception("Error checking robots permission for %s", url)
            return True

    def ensure_allowed(self, url: str, user_agent: str, robots_enabled: bool = True) -> None:
        """Raise `ExclusionRuleDisallowed` when `url` may not be fetched."""
        if not self.is_allowed(url, user_agent, robots_enabled):
            raise ExclusionRuleDisallowed(url, user_agent)
