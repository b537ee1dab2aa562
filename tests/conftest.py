"""
Shared fixtures for repo scorer tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from repo_scorer.schemas import RawRepository


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """Data source returning a fixed list and counting calls."""

    def __init__(self, repos):
        self.repos = list(repos)
        self.calls = []

    async def search(self, language, since, extra_query, limit):
        self.calls.append((language, since, extra_query, limit))
        return tuple(self.repos[:limit])


def make_repo(name: str, stars: int = 0, forks: int = 0, days_ago=None, language: str = "Java") -> RawRepository:
    updated_at = None
    if days_ago is not None:
        updated_at = datetime.now(timezone.utc) - timedelta(days=days_ago)
    return RawRepository(
        name=name,
        full_name=f"user/{name}",
        owner_login="user",
        url=f"https://github.com/user/{name}",
        language=language,
        stars=stars,
        forks=forks,
        updated_at=updated_at,
    )


@pytest.fixture
def clock():
    return FakeClock()

