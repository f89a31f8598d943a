"""
Shared fakes for the automation tests.

The remote backends talk to their APIs through a client object built by a
factory, so tests swap in FakeApiClient and count the requests it receives.
"""

import pytest

from newsletter_core.automation.http import ApiResponse


class FakeApiClient:
    """Records requests and answers them with a responder callable."""

    def __init__(self, responder):
        self.responder = responder
        self.calls = []
        self.entered = 0
        self.exited = 0

    async def __aenter__(self):
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited += 1

    async def request(self, method, path, payload=None):
        self.calls.append((method, path, payload))
        return self.responder(method, path, payload)

    def paths(self, method=None):
        return [p for m, p, _ in self.calls if method is None or m == method]


def ok(data=None, status=200):
    return ApiResponse(status=status, data=data or {}, reason="OK")


def error(status=500, data=None, reason="Internal Server Error"):
    return ApiResponse(status=status, data=data or {}, reason=reason)


@pytest.fixture
def fake_client_factory():
    """Build a (factory, client) pair around a responder."""
    def build(responder):
        client = FakeApiClient(responder)
        calls = {"count": 0}

        def factory():
            calls["count"] += 1
            return client

        factory.calls = calls
        return factory, client
    return build
