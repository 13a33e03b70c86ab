"""Shared fakes: a scripted page and a virtual clock."""

import pytest

from voicebridge.domain.errors import PageUnavailable


class FakePage:
    """PagePort double. ``responses`` maps a script to a value or a callable(arg)."""

    def __init__(self, responses=None, available=True):
        self.responses = dict(responses or {})
        self.is_available = available
        self.calls = []
        self.loads = []
        self.load_error = None

    @staticmethod
    def sequence(*values):
        """Answer successive calls with ``values``, repeating the last one."""
        remaining = list(values)

        def respond(arg):
            value = remaining.pop(0) if len(remaining) > 1 else remaining[0]
            if isinstance(value, Exception):
                raise value
            return value

        return respond

    def count(self, script) -> int:
        return sum(1 for s, _ in self.calls if s == script)

    async def execute(self, script, arg=None):
        self.calls.append((script, arg))
        if not self.is_available:
            raise PageUnavailable()
        response = self.responses.get(script)
        if callable(response):
            return response(arg)
        return response

    async def load(self, url):
        if self.load_error is not None:
            raise self.load_error
        self.loads.append(url)


class FakeClock:
    """Injectable ``sleep`` that advances virtual time instead of waiting."""

    def __init__(self):
        self.elapsed = 0.0
        self.sleeps = []

    async def __call__(self, seconds):
        self.sleeps.append(seconds)
        self.elapsed += seconds


@pytest.fixture
def fake_page():
    return FakePage()


@pytest.fixture
def clock():
    return FakeClock()
