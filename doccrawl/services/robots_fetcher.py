import logging
from urllib.robotparser import RobotFileParser

from doccrawl.exceptions import TransportError

logger = logging.getLogger(__name__)


def allow_all_rules() -> RobotFileParser:
    """Rules used when a site publishes none or they cannot be retrieved."""
    parser = RobotFileParser()
    parser.allow_all = True
    return parser


class RobotsFetcher:
    """Fetch robots.txt and return parsed rules.

    Fails open: a missing, unreachable or unparsable robots.txt yields rules
    that allow everything, so the result can always be cached.
    """

    def __init__(self, http_service):
        self.http_service = http_service

    def fetch(self, robots_url: str, user_agent: str = None) -> RobotFileParser:
        try:
            response = self.http_service.fetch_robots(robots_url, user_agent=user_agent)
        except TransportError as e:
            logger.info("Could not fetch %s, allowing all: %s", robots_url, e.reason)
            return allow_all_rules()

        if response.status_code != 200 or not response.content:
            logger.debug("No exclusion rules at %s (status %s)", robots_url, response.status_code)
            return allow_all_rules()

        try:
            text = response.content.decode(response.encoding or "utf-8", errors="replace")
            parser = RobotFileParser(robots_url)
            parser.parse(text.splitlines())
            return parser
        except Exception:
            logger.exception("Error parsing robots.txt from %s", robots_url)
            return allow_all_rules()
