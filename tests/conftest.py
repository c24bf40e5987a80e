"""Shared fixtures: an in-memory stand-in for the upstream HTTP client."""

import pytest

from nhl_mcp import upstream


class DummyResponse:
    def __init__(self, json_data, status_code=200, reason_phrase="OK"):
        self._json = json_data
        self.status_code = status_code
        self.reason_phrase = reason_phrase

    def json(self):
        return self._json


class DummyClient:
    """Async-context client answering every GET with one canned response."""

    def __init__(self, json_data=None, status_code=200, reason_phrase="OK", exc=None):
        self._json = json_data
        self._status_code = status_code
        self._reason_phrase = reason_phrase
        self._exc = exc
        self.requests = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, params=None, headers=None):
        self.requests.append({"url": url, "params": params, "headers": headers})
        if self._exc is not None:
            raise self._exc
        return DummyResponse(self._json, self._status_code, self._reason_phrase)


@pytest.fixture
def fake_upstream(monkeypatch):
    """Install a DummyClient factory; call it to set the canned response."""
    state = {}

    def install(json_data=None, status_code=200, reason_phrase="OK", exc=None):
        client = DummyClient(json_data, status_code, reason_phrase, exc)
        state["client"] = client
        monkeypatch.setattr(upstream, "create_http_client", lambda *a, **k: client)
        return client

    return install
