from unittest.mock import Mock

import pytest
import requests

from doccrawl.exceptions import TransportError
from doccrawl.services.http_service import HttpService


def _client(status=200, content=b"<html>hi</html>", headers=None, encoding="utf-8"):
    client = Mock()
    client.return_value.status_code = status
    client.return_value.content = content
    client.return_value.headers = headers if headers is not None else {"Content-Type": "text/html; charset=utf-8"}
    client.return_value.encoding = encoding
    return client


def test_fetch_success_sends_agent_and_timeout():
    client = _client()
    http = HttpService(user_agent="TestAgent", http_client=client, timeout=12)
    response = http.fetch("http://example.com")

    assert response.status_code == 200
    assert response.content == b"<html>hi</html>"
    assert response.content_type == "text/html; charset=utf-8"
    assert response.encoding == "utf-8"
    assert response.is_success
    client.assert_called_once_with("http://example.com", headers={"User-Agent": "TestAgent"}, timeout=12)


def test_fetch_per_call_agent_override():
    client = _client()
    http = HttpService(user_agent="TestAgent", http_client=client)
    http.fetch("http://example.com", user_agent="OtherBot/2.0")
    assert client.call_args.kwargs["headers"] == {"User-Agent": "OtherBot/2.0"}


def test_fetch_robots_uses_short_timeout():
    client = _client(content=b"User-agent: *\nDisallow: /private", headers={"Content-Type": "text/plain"})
    http = HttpService(user_agent="TestAgent", http_client=client, timeout=30)
    response = http.fetch_robots("http://example.com/robots.txt")

    assert b"Disallow" in response.content
    assert client.call_args.kwargs["timeout"] == 10


def test_fetch_wraps_timeout():
    client = Mock(side_effect=requests.exceptions.Timeout("read timed out"))
    http = HttpService(user_agent="TestAgent", http_client=client)

    with pytest.raises(TransportError) as exc:
        http.fetch("http://example.com/slow")
    assert exc.value.url == "http://example.com/slow"
    assert "timed out" in exc.value.reason
    assert isinstance(exc.value.__cause__, requests.exceptions.Timeout)


def test_fetch_wraps_connection_error():
    client = Mock(side_effect=requests.exceptions.ConnectionError("refused"))
    http = HttpService(user_agent="TestAgent", http_client=client)

    with pytest.raises(TransportError) as exc:
        http.fetch("http://example.com")
    assert "http://example.com" in str(exc.value)


def test_fetch_missing_content_type():
    client = _client(headers={})
    http = HttpService(user_agent="TestAgent", http_client=client)
    assert http.fetch("http://example.com").content_type is None


def test_non_2xx_is_not_success():
    client = _client(status=404)
    http = HttpService(user_agent="TestAgent", http_client=client)
    assert not http.fetch("http://example.com/missing").is_success
