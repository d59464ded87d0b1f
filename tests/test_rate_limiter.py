"""
Tests for the register/login rate limit.

No user fixtures here: every registration counts against the same budget.
"""

import fakeredis
import pytest
import redis

from app.core.errors import RateLimitExceeded
from app.core.rate_limiter import AUTH_RATE_LIMIT_MESSAGE, RateLimiter
from tests.helpers import API

LOGIN = {"email": "nobody@example.com", "password": "secret123"}


class ExpireFailsOnceRedis(fakeredis.FakeRedis):
    """Drops the connection on the first EXPIRE only."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.expire_failures = 1

    def expire(self, *args, **kwargs):
        if self.expire_failures:
            self.expire_failures -= 1
            raise redis.ConnectionError("connection lost")
        return super().expire(*args, **kwargs)


def test_eleventh_auth_request_is_rejected(client):
    for _ in range(10):
        response = client.post(f"{API}/auth/login", json=LOGIN)
        assert response.status_code == 401

    response = client.post(f"{API}/auth/login", json=LOGIN)

    assert response.status_code == 429
    assert response.json() == {"message": AUTH_RATE_LIMIT_MESSAGE}


def test_register_and_login_share_the_budget(client):
    for i in range(5):
        client.post(
            f"{API}/auth/register",
            json={"name": f"User {i}", "email": f"user{i}@example.com", "password": "secret123"},
        )
    for _ in range(5):
        client.post(f"{API}/auth/login", json=LOGIN)

    response = client.post(
        f"{API}/auth/register",
        json={"name": "Late", "email": "late@example.com", "password": "secret123"},
    )
    assert response.status_code == 429


def test_budget_is_per_client_address(client):
    for _ in range(10):
        client.post(f"{API}/auth/login", json=LOGIN, headers={"X-Forwarded-For": "10.0.0.1"})

    blocked = client.post(f"{API}/auth/login", json=LOGIN, headers={"X-Forwarded-For": "10.0.0.1"})
    other = client.post(f"{API}/auth/login", json=LOGIN, headers={"X-Forwarded-For": "10.0.0.2, 10.0.0.1"})

    assert blocked.status_code == 429
    assert other.status_code == 401


def test_job_routes_are_not_rate_limited(client):
    for _ in range(15):
        assert client.get(f"{API}/jobs").status_code == 401


class TestRateLimiter:
    """RateLimiter against fakeredis"""

    def test_window_counter_and_ttl(self):
        redis_client = fakeredis.FakeRedis(decode_responses=True)
        limiter = RateLimiter(redis_client)

        for _ in range(3):
            limiter.check_rate_limit("k", max_requests=3, window_seconds=900)

        assert redis_client.get("k") == "3"
        assert 0 < redis_client.ttl("k") <= 900

        with pytest.raises(RateLimitExceeded):
            limiter.check_rate_limit("k", max_requests=3, window_seconds=900)

    def test_lost_expire_is_set_on_next_request(self):
        redis_client = ExpireFailsOnceRedis(decode_responses=True)
        limiter = RateLimiter(redis_client)

        # First request: expire fails, the limiter lets it through
        limiter.check_rate_limit("auth:1.2.3.4", max_requests=10, window_seconds=900)
        assert redis_client.ttl("auth:1.2.3.4") == -1

        limiter.check_rate_limit("auth:1.2.3.4", max_requests=10, window_seconds=900)

        assert redis_client.get("auth:1.2.3.4") == "2"
        assert 0 < redis_client.ttl("auth:1.2.3.4") <= 900

    def test_fails_open_when_redis_is_down(self):
        server = fakeredis.FakeServer()
        server.connected = False
        limiter = RateLimiter(fakeredis.FakeRedis(server=server))

        for _ in range(5):
            limiter.check_rate_limit("k", max_requests=1, window_seconds=60)
