"""Shared fixtures for the OrganizeIT test suite."""

import os
import random
import tempfile

# Must happen before anything imports organizeit.log: the log file and the
# default SQLite store both live under ORGANIZEIT_HOME.
os.environ.setdefault("ORGANIZEIT_HOME", tempfile.mkdtemp(prefix="organizeit-tests-"))
os.environ["ORGANIZEIT_STORE"] = "memory"

import pytest
from fastapi.testclient import TestClient

from organizeit.config.loader import reset_config
from organizeit.runtime import Runtime
from organizeit.store import MemoryKVStore

# 2025-06-15T12:00:00Z
EPOCH = 1_749_988_800.0


class FakeClock:
    """Callable clock returning epoch seconds; only moves when told to."""

    def __init__(self, start: float = EPOCH) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Fresh config and runtime for every test."""
    reset_config()
    Runtime.reset()
    yield
    Runtime.reset()
    reset_config()


@pytest.fixture
def store():
    return MemoryKVStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def client():
    """TestClient over the app, backed by a fresh in-memory runtime."""
    from organizeit.api import app
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth():
    return {"Authorization": "Bearer test-token"}
