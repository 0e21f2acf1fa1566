import asyncio
import base64
import json
import uuid

import pytest
import redis
from fastapi import HTTPException

from bloodbridge import rate_limiter
from bloodbridge.auth import verify_firebase_token
from bloodbridge.rate_limiter import check_rate_limit


def _segment(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).decode().rstrip("=")


class TestVerifyFirebaseToken:
    def test_malformed_token(self):
        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(verify_firebase_token("not-a-jwt"))
        assert exc_info.value.status_code == 401

    def test_undecodable_token(self):
        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(verify_firebase_token("###.###.###"))
        assert exc_info.value.status_code == 401

    def test_non_rs256_header_is_rejected_before_fetching_keys(self):
        token = ".".join([_segment({"alg": "HS256", "kid": "k1"}), _segment({"sub": "user-1"}), "c2ln"])

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(verify_firebase_token(token))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token header"


class TestRateLimit:
    def test_blocks_after_limit(self):
        key = f"test:{uuid.uuid4()}"

        results = [check_rate_limit(key, limit=2, window_seconds=60) for _ in range(3)]

        assert [allowed for allowed, _, _ in results] == [True, True, False]
        assert results[-1][1] == 2
        assert 0 < results[-1][2] <= 60

    def test_keys_are_counted_separately(self):
        first, second = f"test:{uuid.uuid4()}", f"test:{uuid.uuid4()}"

        check_rate_limit(first, limit=1, window_seconds=60)

        assert check_rate_limit(first, limit=1, window_seconds=60)[0] is False
        assert check_rate_limit(second, limit=1, window_seconds=60)[0] is True


class TestRedisConnection:
    def test_unreachable_redis_is_not_retried_on_every_request(self, monkeypatch):
        attempts = []

        class UnreachableRedis:
            def ping(self):
                attempts.append(1)
                raise redis.ConnectionError("connection refused")

        monkeypatch.setattr(rate_limiter, "REDIS_URL", "redis://redis.invalid:6379/0")
        monkeypatch.setattr(rate_limiter, "redis_client", None)
        monkeypatch.setattr(rate_limiter, "redis_retry_at", 0.0)
        monkeypatch.setattr(rate_limiter.redis, "from_url", lambda *args, **kwargs: UnreachableRedis())

        assert rate_limiter.get_redis_client() is None
        assert rate_limiter.get_redis_client() is None
        assert len(attempts) == 1

        # Once the retry interval has passed the connection is attempted again
        monkeypatch.setattr(rate_limiter, "redis_retry_at", 0.0)
        assert rate_limiter.get_redis_client() is None
        assert len(attempts) == 2

    def test_limits_still_apply_without_redis(self, monkeypatch):
        monkeypatch.setattr(rate_limiter, "REDIS_URL", "redis://redis.invalid:6379/0")
        monkeypatch.setattr(rate_limiter, "redis_client", None)
        monkeypatch.setattr(rate_limiter, "redis_retry_at", float("inf"))
        key = f"test:{uuid.uuid4()}"

        client = rate_limiter.get_redis_client()

        assert client is None
        assert check_rate_limit(key, 1, 60, client)[0] is True
        assert check_rate_limit(key, 1, 60, client)[0] is False
