import pytest

from doccrawl.utils.url_utils import get_host, host_matches, is_http_url, normalize_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("HTTPS://Developer.Apple.com/documentation/swiftui#overview", "https://developer.apple.com/documentation/swiftui"),
        ("http://example.com:80/a", "http://example.com/a"),
        ("https://example.com:8443/a", "https://example.com:8443/a"),
        ("https://example.com", "https://example.com/"),
        ("https://example.com/search?q=view", "https://example.com/search?q=view"),
    ],
)
def test_normalize_url(url, expected):
    assert normalize_url(url) == expected


def test_get_host():
    assert get_host("https://Docs.Swift.org/x") == "docs.swift.org"
    assert get_host("/relative") is None


def test_is_http_url():
    assert is_http_url("https://example.com/x")
    assert not is_http_url("mailto:someone@example.com")
    assert not is_http_url("ftp://example.com/file")


def test_host_matches_exact_and_subdomains_only():
    assert host_matches("swift.org", "swift.org")
    assert host_matches("docs.swift.org", "swift.org")
    assert not host_matches("notswift.org", "swift.org")
    assert not host_matches("swift.org.evil.com", "swift.org")
