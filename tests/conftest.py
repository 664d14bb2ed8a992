# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-ins for the Supabase query builder and Redis counters
# - A TestClient wired to those stand-ins through dependency overrides
# =============================================================================

import os
import threading

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("CORS_ALLOW_ORIGINS", "http://localhost:3000,https://pyjama-party.back-on-track.eu")

from typing import Any, Callable

import pytest

from lib.rate_limiter import RateLimiter, RateLimitRule


# =============================================================================
# Supabase Stand-in
# =============================================================================

class FakeResponse:
    """Mimics postgrest's APIResponse (data + count)."""

    def __init__(self, data: list[dict[str, Any]] | None = None, count: int | None = None):
        self.data = data if data is not None else []
        self.count = count


class FakeQuery:
    """
    Records every builder call (select, eq, or_, order, ...) and returns
    itself, so chains read like the real client.
    """

    def __init__(self, table_name: str, responder: Callable[["FakeQuery"], FakeResponse]):
        self.table_name = table_name
        self.calls: list[tuple[str, tuple, dict]] = []
        self._responder = responder

    def __getattr__(self, name: str):
        if name.startswith("__"):
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return method

    @property
    def not_(self) -> "FakeQuery":
        self.calls.append(("not_", (), {}))
        return self

    def called(self, name: str) -> list[tuple[tuple, dict]]:
        """Arguments of every call to builder method `name`."""
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]

    def execute(self) -> FakeResponse:
        return self._responder(self)


class FakeSupabase:
    """
    Minimal Supabase client.

    Results are queued per table and consumed in order; the last queued
    result keeps answering. A queued Exception is raised on execute().
    """

    def __init__(self):
        self.results: dict[str, list[Any]] = {}
        self.queries: list[FakeQuery] = []

    def on(self, table_name: str, *results: Any) -> "FakeSupabase":
        self.results.setdefault(table_name, []).extend(results)
        return self

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(name, self._respond)
        self.queries.append(query)
        return query

    def queries_for(self, table_name: str) -> list[FakeQuery]:
        return [q for q in self.queries if q.table_name == table_name]

    def _respond(self, query: FakeQuery) -> FakeResponse:
        queued = self.results.get(query.table_name)
        if not queued:
            return FakeResponse([])

        result = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(result, Exception):
            raise result
        return result


# =============================================================================
# Redis Stand-in
# =============================================================================

class FakePipeline:
    """Queues commands and runs them in order on execute(), like MULTI/EXEC."""

    def __init__(self, redis: "FakeRedis"):
        self._redis = redis
        self._commands: list[tuple[str, tuple]] = []

    def incr(self, key: str) -> "FakePipeline":
        self._commands.append(("incr", (key,)))
        return self

    def pttl(self, key: str) -> "FakePipeline":
        self._commands.append(("pttl", (key,)))
        return self

    def execute(self) -> list[Any]:
        return [getattr(self._redis, name)(*args) for name, args in self._commands]


class FakeRedis:
    """Dict-backed subset of redis.Redis used by the rate limiter."""

    def __init__(self):
        self.values: dict[str, int] = {}
        self.ttls: dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        value = self.values.get(key)
        return None if value is None else str(value)

    def incr(self, key: str) -> int:
        with self._lock:
            self.values[key] = self.values.get(key, 0) + 1
            return self.values[key]

    def decr(self, key: str) -> int:
        with self._lock:
            self.values[key] = self.values.get(key, 0) - 1
            return self.values[key]

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    def pexpire(self, key: str, ms: int) -> bool:
        if key not in self.values:
            return False
        self.ttls[key] = ms
        return True

    def pttl(self, key: str) -> int:
        if key not in self.values:
            return -2
        return self.ttls.get(key, -1)

    def ping(self) -> bool:
        return True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase():
    """Empty Supabase stand-in."""
    return FakeSupabase()


@pytest.fixture
def fake_redis():
    """Empty Redis stand-in."""
    return FakeRedis()


@pytest.fixture
def limiter(fake_redis):
    """RateLimiter over the fake Redis."""
    return RateLimiter(fake_redis)


@pytest.fixture
def dreams_rule():
    """Small quota so tests can exhaust it quickly."""
    return RateLimitRule(scope="dreams", max_requests=3, window_seconds=300)


@pytest.fixture
def sample_station_rows():
    """Sample rows from the stations table."""
    return [
        {
            "id": "8000261",
            "name": "München Hbf",
            "city": "Munich",
            "country": "Germany",
            "latitude": 48.1402,
            "longitude": 11.5600,
        },
        {
            "id": "8103000",
            "name": "Wien Hauptbahnhof",
            "city": "Vienna",
            "country": "Austria",
            "latitude": 48.1851,
            "longitude": 16.3771,
        },
    ]


@pytest.fixture
def sample_dream_payload():
    """A valid dream submission as the frontend sends it."""
    return {
        "originStation": "Berlin Hauptbahnhof, Berlin, Germany",
        "destinationCity": "Vienna",
        "dreamerName": "Alex",
        "email": "Alex@Example.org",
        "why": "Night trains beat flying.",
    }


@pytest.fixture
def api_client(fake_supabase):
    """
    TestClient with the Supabase dependency replaced and rate limiting off.

    Tests that need a limiter override get_rate_limiter themselves.
    """
    from fastapi.testclient import TestClient

    from app.dependencies import get_rate_limiter, get_supabase
    from app.main import app

    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_rate_limiter] = lambda: None

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
