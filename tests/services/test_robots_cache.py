from unittest.mock import Mock
from urllib.robotparser import RobotFileParser

from doccrawl.services.robots_cache import RobotsCache


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def test_cache_miss_returns_none():
    cache = RobotsCache()
    assert cache.get("https://example.com") is None


def test_cache_stores_and_retrieves_parser():
    cache = RobotsCache()
    parser = Mock(spec=RobotFileParser)
    cache.set("https://example.com", parser)
    assert cache.get("https://example.com") is parser


def test_clear_removes_all_entries():
    cache = RobotsCache()
    cache.set("https://example.com", Mock())
    cache.set("https://other.com", Mock())
    cache.clear()
    assert cache.get("https://example.com") is None
    assert cache.get("https://other.com") is None
    assert len(cache) == 0


def test_lru_eviction_keeps_recently_used():
    cache = RobotsCache(max_size=2)
    a, b, c = Mock(), Mock(), Mock()
    cache.set("https://a.com", a)
    cache.set("https://b.com", b)
    assert cache.get("https://a.com") is a  # a becomes most recent
    cache.set("https://c.com", c)

    assert cache.get("https://b.com") is None
    assert cache.get("https://a.com") is a
    assert cache.get("https://c.com") is c


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = RobotsCache(ttl_seconds=60, clock=clock)
    cache.set("https://example.com", Mock())

    clock.now = 59
    assert cache.get("https://example.com") is not None
    clock.now = 61
    assert cache.get("https://example.com") is None
    assert len(cache) == 0


def test_non_positive_ttl_disables_caching():
    cache = RobotsCache(ttl_seconds=0)
    cache.set("https://example.com", Mock())
    assert cache.get("https://example.com") is None
