"""Shared fixtures: a fake requests layer for the API client."""

import pytest
import requests

from shopease import api


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason=""):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeHTTP:
    """Records outgoing calls and answers with a canned response or exception."""

    def __init__(self):
        self.calls = []
        self.response = FakeResponse(200, {})
        self.exc = None

    def reply(self, status_code=200, payload=None, reason=""):
        self.response = FakeResponse(status_code, payload, reason)
        self.exc = None

    def fail(self, exc):
        self.exc = exc

    def _handle(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.response

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def http(monkeypatch):
    fake = FakeHTTP()
    monkeypatch.setattr(api.requests, "post", fake.post)
    monkeypatch.setattr(api.requests, "get", fake.get)
    return fake


@pytest.fixture
def network_down(http):
    http.fail(requests.ConnectionError("Connection refused"))
    return http


@pytest.fixture
def product():
    return {"id": "7", "name": "Air Force 1", "description": "White leather", "price": 1500.0, "photo": "af1.jpg"}


@pytest.fixture
def session():
    return {"user": {"username": "jane", "name": "Jane Wanjiru", "email": "jane@example.com"}, "token": "tok-123"}
