import logging
from typing import Callable, List, Optional, Sequence
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from doccrawl.utils.url_utils import host_matches, is_http_url

logger = logging.getLogger(__name__)


class LinkExtractor:
    """Parses outbound links from markup and keeps the ones a crawl may follow.

    A link survives when its host is allow-listed (or the list is empty) and
    its path contains one of the patterns (or the list is empty).
    """

    def __init__(self, soup_factory: Optional[Callable[[str], BeautifulSoup]] = None):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract_links(self, base_url: str, html: str) -> List[str]:
        """Return absolute http(s) links found in `html`, in document order, without duplicates."""
        if not html:
            return []
        soup = self._soup_factory(html)
        urls: List[str] = []
        seen = set()
        for a in soup.find_all("a", href=True):
            href = (a.get("href") or "").strip()
            if not href or href.startswith("#"):
                continue
            try:
                abs_url, _ = urldefrag(urljoin(base_url, href))
                urlparse(abs_url).port  # raises ValueError on a malformed port
            except ValueError:
                logger.debug("Dropping malformed link %r on %s", href, base_url)
                continue
            if not is_http_url(abs_url) or abs_url in seen:
                continue
            seen.add(abs_url)
            urls.append(abs_url)
        return urls

    def is_allowed(self, url: str, allowed_hosts: Sequence[str], path_patterns: Sequence[str]) -> bool:
        parsed = urlparse(url)
        if allowed_hosts:
            host = parsed.hostname
            if not host or not any(host_matches(host, allowed) for allowed in allowed_hosts):
                logger.debug("Skipping (host not allowed) %s", url)
                return False
        if path_patterns:
            if not any(pattern in parsed.path for pattern in path_patterns):
                logger.debug("Skipping (path not matched) %s", url)
                return False
        return True

    def extract_allowed_links(self, base_url: str, html: str, allowed_hosts: Sequence[str] = (), path_patterns: Sequence[str] = ()) -> List[str]:
        return [
            url for url in self.extract_links(base_url, html)
            if self.is_allowed(url, allowed_hosts, path_patterns)
        ]
