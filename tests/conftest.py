"""Shared fixtures: settings and fake aiohttp sessions."""

import pytest

from golink.config import Settings


class FakeResponse:
    def __init__(self, status=200, body=""):
        self.status = status
        self._body = body

    async def text(self, encoding=None, errors="strict"):
        if isinstance(self._body, bytes):
            return self._body.decode(encoding or "utf-8", errors)
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; replays queued responses or raises queued errors."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def _next(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


def session_factory_for(session):
    timeouts = []

    def factory(timeout):
        timeouts.append(timeout)
        return session

    factory.timeouts = timeouts
    return factory


@pytest.fixture
def settings():
    return Settings(access_key="AKIDEXAMPLE", secret_key="secret", partner_tag="test-20")


@pytest.fixture
def anonymous_settings():
    return Settings(partner_tag="test-20")
