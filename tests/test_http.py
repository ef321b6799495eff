import pytest
import requests

from polinet.errors import DecodeError, HTTPError
from polinet.http import HTTPClient, build_url
from polinet.utils import RateLimiter


class DummyResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", text=None):
        self.status_code = status_code
        self.payload = payload
        self.reason = reason
        self.text = text
        self.url = ""

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self.text is not None:
            raise ValueError("Expecting value")
        return self.payload


class DummySession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.headers = {}
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(responses, **kwargs):
    session = DummySession(responses)
    client = HTTPClient(rate_limiter=RateLimiter(rate=1000), backoff=0, session=session, **kwargs)
    return client, session


def test_build_url_serializes_params():
    url = build_url("https://example.org/w/api.php", {"action": "query", "titles": "A B"})
    assert url.startswith("https://example.org/w/api.php?")
    assert "action=query" in url
    assert "titles=A+B" in url


def test_get_json_returns_payload():
    client, session = make_client([DummyResponse(payload={"query": {}})])
    assert client.get_json("https://example.org/w/api.php", {"action": "query"}) == {"query": {}}
    assert "action=query" in session.requested[0]
    assert "User-Agent" in session.headers


def test_non_success_status_raises_http_error():
    client, _ = make_client([DummyResponse(status_code=404, reason="Not Found")])
    with pytest.raises(HTTPError) as info:
        client.get_json("https://example.org/w/api.php", {"a": "b"})
    assert info.value.status == 404
    assert info.value.status_text == "Not Found"
    assert info.value.url.endswith("?a=b")


def test_transient_status_is_retried():
    client, session = make_client(
        [DummyResponse(status_code=503, reason="Busy"), DummyResponse(payload={"ok": True})],
        max_retries=3,
    )
    assert client.get_json("https://example.org/w/api.php") == {"ok": True}
    assert len(session.requested) == 2


def test_retries_exhausted():
    client, session = make_client(
        [DummyResponse(status_code=503, reason="Busy"), DummyResponse(status_code=503, reason="Busy")],
        max_retries=2,
    )
    with pytest.raises(HTTPError) as info:
        client.get_json("https://example.org/w/api.php")
    assert info.value.status == 503
    assert len(session.requested) == 2


def test_transport_error_becomes_http_error():
    client, _ = make_client([requests.ConnectionError("refused")])
    with pytest.raises(HTTPError) as info:
        client.get_json("https://example.org/w/api.php")
    assert info.value.status is None


def test_invalid_json_raises_decode_error():
    client, _ = make_client([DummyResponse(text="<html>")])
    with pytest.raises(DecodeError):
        client.get_json("https://example.org/w/api.php")
