"""Tests for token bucket rate limiting."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from shortlinks.ratelimit import InMemoryTokenBucketStore, RedisTokenBucketStore


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def ticker():
    return FakeMonotonic()


@pytest.mark.asyncio
class TestInMemoryTokenBucketStore:
    """Test the in-process bucket store."""

    async def test_allows_burst_up_to_capacity(self, ticker):
        limiter = InMemoryTokenBucketStore(capacity=5, refill_seconds=60, clock=ticker)

        results = [await limiter.consume("1.2.3.4") for _ in range(6)]

        assert results == [True] * 5 + [False]

    async def test_buckets_are_per_key(self, ticker):
        limiter = InMemoryTokenBucketStore(capacity=1, refill_seconds=60, clock=ticker)

        assert await limiter.consume("1.1.1.1")
        assert await limiter.consume("2.2.2.2")
        assert not await limiter.consume("1.1.1.1")

    async def test_refills_continuously(self, ticker):
        limiter = InMemoryTokenBucketStore(capacity=5, refill_seconds=60, clock=ticker)
        for _ in range(5):
            await limiter.consume("k")

        ticker.now += 11.9
        assert not await limiter.consume("k")

        ticker.now += 0.2
        assert await limiter.consume("k")

    async def test_idle_buckets_are_evicted(self, ticker):
        limiter = InMemoryTokenBucketStore(capacity=5, refill_seconds=60, clock=ticker)
        await limiter.consume("a")
        await limiter.consume("b")
        assert len(limiter) == 2

        ticker.now += 61
        await limiter.consume("c")

        assert len(limiter) == 1

    async def test_retry_after(self):
        assert InMemoryTokenBucketStore(capacity=5, refill_seconds=60).retry_after() == 12
        assert InMemoryTokenBucketStore(capacity=100, refill_seconds=1).retry_after() == 1


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.register_script.return_value = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    return client


@pytest.mark.asyncio
class TestRedisTokenBucketStore:
    """Test the Redis-backed bucket store with a mocked client."""

    async def test_consume_runs_script_with_bucket_key(self, redis_client):
        limiter = RedisTokenBucketStore(client=redis_client, capacity=5, refill_seconds=60, clock=lambda: 50.0)
        script = redis_client.register_script.return_value

        assert await limiter.consume("1.2.3.4")

        script.assert_awaited_once_with(
            keys=["shortlinks:ratelimit:1.2.3.4"],
            args=[5, 5 / 60, 50.0, 61],
        )

    async def test_denied_when_script_returns_zero(self, redis_client):
        redis_client.register_script.return_value = AsyncMock(return_value=0)
        limiter = RedisTokenBucketStore(client=redis_client)

        assert not await limiter.consume("1.2.3.4")

    async def test_fails_open_on_redis_error(self, redis_client):
        redis_client.register_script.return_value = AsyncMock(side_effect=RedisConnectionError("down"))
        limiter = RedisTokenBucketStore(client=redis_client)

        assert await limiter.consume("1.2.3.4")

    async def test_health_check_and_close(self, redis_client):
        limiter = RedisTokenBucketStore(client=redis_client)

        assert await limiter.health_check()
        redis_client.ping.side_effect = RedisConnectionError("down")
        assert not await limiter.health_check()

        await limiter.close()
        redis_client.aclose.assert_awaited_once()


def test_rejects_bad_settings():
    with pytest.raises(ValueError):
        InMemoryTokenBucketStore(capacity=0)
    with pytest.raises(ValueError):
        InMemoryTokenBucketStore(refill_seconds=0)
    with pytest.raises(ValueError):
        RedisTokenBucketStore()
