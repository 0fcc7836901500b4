"""Fake HTTP transport for the client package tests."""
import threading
from urllib.parse import urlparse


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", json_error=False):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = ""
        self._json_error = json_error

    def json(self):
        if self._json_error:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """
    Stand-in for ``requests.Session``.

    ``handler(path, params)`` returns a FakeResponse or an exception
    instance to raise. Calls are recorded in ``calls``.
    """

    def __init__(self, handler):
        self.handler = handler
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, params=None, timeout=None):
        path = urlparse(url).path
        with self._lock:
            self.calls.append((path, dict(params or {})))
        outcome = self.handler(path, params or {})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def count(self, path):
        with self._lock:
            return sum(1 for p, _ in self.calls if p == path)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
