from datetime import datetime, timedelta, timezone

import pytest


class FakeClock:
    """Deterministic stand-in for utc_now(); advance() moves time forward."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def pickup_location():
    # Example: Center of a city
    return (40.7128, -74.0060)
