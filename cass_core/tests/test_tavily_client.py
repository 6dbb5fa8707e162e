import httpx
import pytest

from cass_core.domain.exceptions import NetworkUnavailableError
from cass_core.providers.http_backend import PARSE_FALLBACK
from cass_core.providers.tavily_client import TavilyClient


class SettingsStub:
    tavily_api_key = "tvly-test-key"
    tavily_base_url = "https://api.tavily.com"
    search_depth = "advanced"
    search_max_results = 5
    http_timeout = 1.0
    max_attempts = 3
    retry_backoff_base = 0.0
    retry_backoff_max = 0.0


class Resp:
    status_code = 200

    def __init__(self, body):
        self._body = body

    def json(self):
        return self._body


def _fake_client(handler):
    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def post(self, *a, **kw):
            return handler(*a, **kw)

    return Client


def test_tavily_search_payload_and_answer(monkeypatch):
    captured = {}

    def handler(url, json=None, headers=None):
        captured.update(url=url, json=json, headers=headers)
        return Resp({"answer": "The Lakers won 110-102.", "results": [{"title": "ignored"}]})

    monkeypatch.setattr("httpx.Client", _fake_client(handler))
    answer = TavilyClient(SettingsStub()).search("who won the game today")
    assert answer == "The Lakers won 110-102."
    assert captured["url"] == "https://api.tavily.com/search"
    assert captured["json"] == {
        "query": "who won the game today",
        "search_depth": "advanced",
        "max_results": 5,
        "include_answer": True,
    }
    assert captured["headers"]["Authorization"] == "Bearer tvly-test-key"


def test_tavily_missing_answer_falls_back(monkeypatch):
    monkeypatch.setattr("httpx.Client", _fake_client(lambda *a, **kw: Resp({"answer": None, "results": []})))
    assert TavilyClient(SettingsStub()).search("news") == PARSE_FALLBACK


def test_tavily_retries_then_succeeds(monkeypatch):
    calls = []
    sleeps = []

    class Backoff(SettingsStub):
        retry_backoff_base = 0.5
        retry_backoff_max = 4.0

    def handler(*a, **kw):
        calls.append(1)
        if len(calls) < 3:
            raise httpx.ConnectError("dns failure")
        return Resp({"answer": "ok"})

    monkeypatch.setattr("httpx.Client", _fake_client(handler))
    client = TavilyClient(Backoff(), sleep=sleeps.append)
    assert client.search("news") == "ok"
    assert len(calls) == 3
    assert sleeps == [0.5, 1.0]


def test_tavily_offline(monkeypatch):
    class Offline:
        is_connected = False

    monkeypatch.setattr("httpx.Client", _fake_client(lambda *a, **kw: pytest.fail("should not post")))
    with pytest.raises(NetworkUnavailableError):
        TavilyClient(SettingsStub(), connectivity=Offline()).search("news")
