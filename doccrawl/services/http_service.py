import requests
from typing import Callable, Optional

from doccrawl.domain.http_response import HttpResponse
from doccrawl.exceptions import TransportError


class HttpService:
    """
    HTTP client wrapper for fetching documentation pages and robots.txt files.

    Requires http_client callable for dependency injection (`requests.get` in
    production) so tests can swap the network out without patching.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: float = 30.0):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str, user_agent: Optional[str] = None, timeout: Optional[float] = None) -> HttpResponse:
        """Fetch URL and return the raw response. Transport failures raise TransportError."""
        headers = {"User-Agent": user_agent or self.user_agent}
        try:
            resp = self.http_client(url, headers=headers, timeout=timeout if timeout is not None else self.timeout)
        except requests.exceptions.Timeout as e:
            raise TransportError(url, f"timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(url, str(e)) from e

        # Let real exceptions from a misbehaving response object bubble up.
        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        return HttpResponse(
            url=url,
            status_code=int(resp.status_code),
            content=resp.content,
            content_type=ct,
            encoding=getattr(resp, 'encoding', None),
        )

    def fetch_robots(self, robots_url: str, user_agent: Optional[str] = None) -> HttpResponse:
        """Fetch robots.txt - delegates to fetch() with a short timeout."""
        return self.fetch(robots_url, user_agent=user_agent, timeout=min(self.timeout, 10))
