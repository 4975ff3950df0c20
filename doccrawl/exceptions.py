"""Custom exceptions for DocCrawl services."""
from typing import Optional


class DocCrawlError(Exception):
    """Base class for every error raised by the crawler and extraction pipeline."""


class InvalidConfiguration(DocCrawlError, ValueError):
    """Raised when a crawl config fails validation. The crawl never starts."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid configuration: {reason}")


class TransportError(DocCrawlError):
    """Raised when a single document fetch fails (non-2xx, timeout, connection failure)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Fetch failed for {url}: {reason}")


class DecodingError(TransportError):
    """Raised when a response body cannot be interpreted as text."""

    def __init__(self, url: str, reason: str):
        super().__init__(url, reason)


class RateLimitExceeded(DocCrawlError):
    """Raised when the next request slot for a host is further away than allowed."""

    def __init__(self, host: str, wait_seconds: float):
        self.host = host
        self.wait_seconds = wait_seconds
        super().__init__(f"Rate limit exceeded for {host}: next slot in {wait_seconds:.2f}s")


class ExclusionRuleDisallowed(DocCrawlError):
    """Raised when robots.txt disallows a URL for the configured agent."""

    def __init__(self, url: str, user_agent: str):
        self.url = url
        self.user_agent = user_agent
        super().__init__(f"Crawling {url} disallowed by robots.txt for {user_agent}")


class StorageError(DocCrawlError):
    """Raised when the knowledge store fails to save a record."""

    def __init__(self, subject_id: str, original: Exception):
        self.subject_id = subject_id
        self.original = original
        super().__init__(f"Could not store knowledge for {subject_id}: {original}")


class CrawlNotFound(DocCrawlError):
    def __init__(self, crawl_id: str):
        self.crawl_id = crawl_id
        super().__init__(f"Crawl {crawl_id} not found")


class CrawlFailed(DocCrawlError):
    def __init__(self, crawl_id: str, error: Optional[str] = None):
        self.crawl_id = crawl_id
        self.error = error
        detail = f": {error}" if error else ""
        super().__init__(f"Crawl {crawl_id} failed{detail}")


class CrawlCancelled(DocCrawlError):
    def __init__(self, crawl_id: str):
        self.crawl_id = crawl_id
        super().__init__(f"Crawl {crawl_id} cancelled")


class CrawlTimeout(DocCrawlError):
    def __init__(self, crawl_id: str, timeout: float):
        self.crawl_id = crawl_id
        self.timeout = timeout
        super().__init__(f"Crawl {crawl_id} did not finish within {timeout}s")
