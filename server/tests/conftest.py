import os

# Must be set before the app modules read settings
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_REQUESTS", "false")

import pytest
from app.core.rate_limiter import ALL_LIMITERS
from main import app

class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds

@pytest.fixture(autouse=True)
def reset_app_state():
    for limiter in ALL_LIMITERS:
        limiter.reset()
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def clock():
    return FakeClock()
