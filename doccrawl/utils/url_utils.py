from typing import Optional
from urllib.parse import urlparse, urlunparse


def normalize_url(url: str) -> str:
    """Return the dedup key for `url`.

    Lowercases scheme and host, drops the fragment and default ports, and
    turns an empty path into "/". The query string is kept since documentation
    sites use it to select content.
    """
    parsed = urlparse(url.strip())
    scheme = parsed.scheme.lower()
    host = (parsed.hostname or "").lower()
    netloc = host
    if parsed.port and not ((scheme == "http" and parsed.port == 80) or (scheme == "https" and parsed.port == 443)):
        netloc = f"{host}:{parsed.port}"
    path = parsed.path or "/"
    return urlunparse((scheme, netloc, path, parsed.params, parsed.query, ""))


def get_host(url: str) -> Optional[str]:
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def is_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def host_matches(host: str, allowed: str) -> bool:
    """True when `host` is `allowed` or one of its subdomains."""
    host = host.lower()
    allowed = allowed.lower().strip(".")
    return host == allowed or host.endswith("." + allowed)
