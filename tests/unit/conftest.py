"""
Unit Test Fixtures.

Fixtures for unit tests. Unit tests never start the HTTP app.
"""

from datetime import datetime, timedelta

import pytest


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def user_id() -> str:
    return "user-1"


@pytest.fixture
def other_user_id() -> str:
    return "user-2"
