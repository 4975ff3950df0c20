from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Iterable, Tuple
from urllib.parse import urlparse

from doccrawl.exceptions import InvalidConfiguration

DEFAULT_MAX_DEPTH = 3
DEFAULT_MAX_PAGES = 500
DEFAULT_USER_AGENT = "DocCrawl/1.0"
DEFAULT_RATE_LIMIT = 1.0


@dataclass(frozen=True)
class CrawlConfig:
    """One crawl request. Created once by the caller and never mutated."""

    start_url: str
    name: str = ""
    max_depth: int = DEFAULT_MAX_DEPTH
    max_pages: int = DEFAULT_MAX_PAGES
    allowed_hosts: Tuple[str, ...] = ()
    path_patterns: Tuple[str, ...] = ()
    respect_robots: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    rate_limit: float = DEFAULT_RATE_LIMIT
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        # accept lists from callers but store immutable tuples
        object.__setattr__(self, "allowed_hosts", tuple(self.allowed_hosts or ()))
        object.__setattr__(self, "path_patterns", tuple(self.path_patterns or ()))

    @property
    def min_interval(self) -> float:
        return 1.0 / self.rate_limit

    def __repr__(self):
        return f"<CrawlConfig id={self.id} name={self.name!r} start={self.start_url}>"


def validate_config(config: CrawlConfig) -> None:
    """Raise `InvalidConfiguration` if `config` cannot be crawled. No side effects."""
    if config is None:
        raise InvalidConfiguration("config is required")
    if config.max_depth <= 0:
        raise InvalidConfiguration("max_depth must be positive")
    if config.max_pages <= 0:
        raise InvalidConfiguration("max_pages must be positive")
    if config.rate_limit <= 0:
        raise InvalidConfiguration("rate_limit must be positive")
    try:
        parsed = urlparse(config.start_url or "")
        parsed.port  # raises on an out-of-range or non-numeric port
    except ValueError as e:
        raise InvalidConfiguration(f"start_url is malformed: {e}") from e
    if not parsed.scheme or not parsed.netloc:
        raise InvalidConfiguration(f"start_url must be absolute: {config.start_url!r}")


class CrawlConfigBuilder:
    """Fluent builder for `CrawlConfig`; callers override only what matters.

    Every `with_*` call returns a new builder so partially built configs can be
    shared safely.
    """

    def __init__(self, start_url: str, config: CrawlConfig = None):
        self._config = config if config is not None else CrawlConfig(start_url=start_url)

    def _with(self, **changes) -> "CrawlConfigBuilder":
        return CrawlConfigBuilder(self._config.start_url, replace(self._config, **changes))

    def with_id(self, crawl_id: str) -> "CrawlConfigBuilder":
        return self._with(id=crawl_id)

    def with_name(self, name: str) -> "CrawlConfigBuilder":
        return self._with(name=name)

    def with_max_depth(self, depth: int) -> "CrawlConfigBuilder":
        return self._with(max_depth=depth)

    def with_max_pages(self, pages: int) -> "CrawlConfigBuilder":
        return self._with(max_pages=pages)

    def with_allowed_hosts(self, hosts: Iterable[str]) -> "CrawlConfigBuilder":
        return self._with(allowed_hosts=tuple(hosts))

    def with_path_patterns(self, patterns: Iterable[str]) -> "CrawlConfigBuilder":
        return self._with(path_patterns=tuple(patterns))

    def with_respect_robots(self, respect: bool) -> "CrawlConfigBuilder":
        return self._with(respect_robots=bool(respect))

    def with_user_agent(self, user_agent: str) -> "CrawlConfigBuilder":
        return self._with(user_agent=user_agent)

    def with_rate_limit(self, limit: float) -> "CrawlConfigBuilder":
        return self._with(rate_limit=limit)

    def build(self) -> CrawlConfig:
        return self._config
