# =============================================================================
# tests/test_dream_service.py - Dream Submission and Listing Tests
# =============================================================================

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.exceptions import (
    DatabaseError,
    RateLimitExceededError,
    RateLimitUnavailableError,
)
from core.models.dream import DreamCreate
from core.services.dream_service import DreamService
from lib.rate_limiter import RateLimiter, build_key
from tests.conftest import FakeRedis, FakeResponse


class BrokenRedis(FakeRedis):
    """Redis stand-in whose counter updates fail."""

    def incr(self, key):
        raise RedisConnectionError("connection refused")


@pytest.fixture
def dream(sample_dream_payload):
    return DreamCreate.model_validate(sample_dream_payload)


def inserted_row(fake_supabase):
    query = fake_supabase.queries_for("dreams")[0]
    (row,), _ = query.called("insert")[0]
    return row


class TestSubmit:
    """Tests for DreamService.submit()."""

    def test_insert_uses_server_side_id_and_timestamp(self, fake_supabase, dreams_rule, dream):
        service = DreamService(fake_supabase, None, dreams_rule)

        response, quota = service.submit(dream, identity="203.0.113.50")

        row = inserted_row(fake_supabase)
        assert response.success is True
        assert response.id == row["id"]
        assert row["created_at"]
        assert row["email"] == "alex@example.org"
        assert quota is None

    def test_returned_id_prefers_stored_row(self, fake_supabase, dreams_rule, dream):
        fake_supabase.on("dreams", FakeResponse([{"id": "stored-id"}]))

        response, _ = DreamService(fake_supabase, None, dreams_rule).submit(dream, "203.0.113.50")

        assert response.id == "stored-id"

    def test_coordinates_looked_up_from_station_name(self, fake_supabase, dreams_rule, dream):
        fake_supabase.on("stations", FakeResponse([{"latitude": 52.5251, "longitude": 13.3695}]))

        DreamService(fake_supabase, None, dreams_rule).submit(dream, "203.0.113.50")

        lookup = fake_supabase.queries_for("stations")[0]
        assert lookup.called("ilike")[0][0] == ("name", "%Berlin Hauptbahnhof%")
        row = inserted_row(fake_supabase)
        assert row["origin_latitude"] == 52.5251
        assert row["origin_longitude"] == 13.3695

    def test_coordinate_lookup_failure_still_inserts(self, fake_supabase, dreams_rule, dream):
        fake_supabase.on("stations", RuntimeError("stations offline"))

        DreamService(fake_supabase, None, dreams_rule).submit(dream, "203.0.113.50")

        row = inserted_row(fake_supabase)
        assert row["origin_latitude"] is None
        assert row["destination_longitude"] is None

    def test_insert_failure_raises(self, fake_supabase, dreams_rule, dream):
        fake_supabase.on("dreams", RuntimeError("insert failed"))

        with pytest.raises(DatabaseError):
            DreamService(fake_supabase, None, dreams_rule).submit(dream, "203.0.113.50")

    def test_quota_headers_returned(self, fake_supabase, limiter, dreams_rule, dream):
        _, quota = DreamService(fake_supabase, limiter, dreams_rule).submit(dream, "203.0.113.50")

        assert quota.remaining == 2
        assert quota.headers()["X-RateLimit-Limit"] == "3"

    def test_over_quota_never_touches_database(self, fake_supabase, fake_redis, limiter, dreams_rule, dream):
        fake_redis.values[build_key(dreams_rule, "203.0.113.50")] = 3
        fake_redis.ttls[build_key(dreams_rule, "203.0.113.50")] = 42_000

        with pytest.raises(RateLimitExceededError) as exc_info:
            DreamService(fake_supabase, limiter, dreams_rule).submit(dream, "203.0.113.50")

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "42"
        assert fake_supabase.queries == []
        assert fake_redis.values[build_key(dreams_rule, "203.0.113.50")] == 3

    def test_fourth_attempt_in_window_is_rejected(self, fake_supabase, limiter, dreams_rule, dream):
        service = DreamService(fake_supabase, limiter, dreams_rule)
        for _ in range(3):
            service.submit(dream, "203.0.113.50")

        with pytest.raises(RateLimitExceededError):
            service.submit(dream, "203.0.113.50")

        assert len(fake_supabase.queries_for("dreams")) == 3

    def test_other_clients_have_their_own_quota(self, fake_supabase, limiter, dreams_rule, dream):
        service = DreamService(fake_supabase, limiter, dreams_rule)
        for _ in range(3):
            service.submit(dream, "203.0.113.50")

        _, quota = service.submit(dream, "198.51.100.7")

        assert quota.allowed is True

    def test_store_failure_fails_closed(self, fake_supabase, dreams_rule, dream):
        service = DreamService(fake_supabase, RateLimiter(BrokenRedis()), dreams_rule)

        with pytest.raises(RateLimitUnavailableError) as exc_info:
            service.submit(dream, "203.0.113.50")

        assert exc_info.value.status_code == 503
        assert fake_supabase.queries == []


class TestListDreams:
    """Tests for DreamService.list_dreams()."""

    def test_rows_are_public(self, fake_supabase, dreams_rule):
        fake_supabase.on("dreams", FakeResponse([
            {
                "id": "d1",
                "dreamer_name": "Alex",
                "origin_station": "Berlin Hbf",
                "destination_city": "Vienna",
                "origin_latitude": 52.5,
                "origin_longitude": 13.4,
                "created_at": "2025-09-01T10:00:00+00:00",
                "email": "alex@example.org",
            },
        ], count=1))

        result = DreamService(fake_supabase, None, dreams_rule).list_dreams()

        payload = result.model_dump(by_alias=True)
        assert "email" not in payload["dreams"][0]
        assert payload["dreams"][0]["coordinates"] == (13.4, 52.5)
        assert payload["total"] == 1

    def test_email_is_not_selected(self, fake_supabase, dreams_rule):
        DreamService(fake_supabase, None, dreams_rule).list_dreams()

        query = fake_supabase.queries_for("dreams")[0]
        (columns,), _ = query.called("select")[0]
        assert "email" not in columns

    @pytest.mark.parametrize("limit,offset,expected", [
        (50, 0, (0, 49)),
        (500, 10, (10, 109)),
        (0, -5, (0, 0)),
    ])
    def test_paging_is_clamped(self, fake_supabase, dreams_rule, limit, offset, expected):
        DreamService(fake_supabase, None, dreams_rule).list_dreams(limit=limit, offset=offset)

        query = fake_supabase.queries_for("dreams")[0]
        assert query.called("range")[0][0] == expected

    def test_newest_first(self, fake_supabase, dreams_rule):
        DreamService(fake_supabase, None, dreams_rule).list_dreams()

        query = fake_supabase.queries_for("dreams")[0]
        assert query.called("order")[0] == (("created_at",), {"desc": True})
