"""Fixtures: an isolated relay per test and an app/client built around it."""

import pytest
from fastapi.testclient import TestClient

from msgrelay.config import Settings
from msgrelay.relay import MessageRelay
from server import create_app


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def relay():
    return MessageRelay()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def app(settings, relay):
    return create_app(settings, relay)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
