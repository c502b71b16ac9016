"""Token bucket rate limiting keyed by client address.

Two bucket stores share the same interface:

    InMemoryTokenBucketStore  process-wide map with idle eviction
    RedisTokenBucketStore     shared between workers through redis.asyncio

Buckets refill continuously at ``capacity / refill_seconds`` tokens per
second up to ``capacity``; each request consumes one token.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


@dataclass
class TokenBucket:
    tokens: float
    updated_at: float


class InMemoryTokenBucketStore:
    """Token buckets held in a process-wide dict.

    Buckets idle for longer than ``idle_seconds`` are evicted on a periodic
    sweep. Any bucket idle for a full refill period is full again, so the
    default eviction window loses no state.
    """

    def __init__(
        self,
        capacity: int = 5,
        refill_seconds: float = 60.0,
        idle_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        if capacity < 1:
            raise ValueError(f"Capacity must be at least 1 (given value: {capacity})")
        if refill_seconds <= 0:
            raise ValueError(f"Refill seconds must be positive (given value: {refill_seconds})")

        self.capacity = capacity
        self.refill_seconds = refill_seconds
        self.rate = capacity / refill_seconds
        self.idle_seconds = idle_seconds if idle_seconds is not None else refill_seconds
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self._buckets: Dict[str, TokenBucket] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    async def consume(self, key: str) -> bool:
        """Take one token from the bucket for ``key``.

        Returns:
            True if the request is allowed
        """
        with self._lock:
            now = self.clock()
            self._evict_idle(now)

            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket(tokens=self.capacity, updated_at=now)
                self._buckets[key] = bucket

            elapsed = max(0.0, now - bucket.updated_at)
            bucket.tokens = min(self.capacity, bucket.tokens + elapsed * self.rate)
            bucket.updated_at = now

            if bucket.tokens >= 1:
                bucket.tokens -= 1
                return True
            return False

    def retry_after(self) -> int:
        """Seconds until one token is back in an empty bucket."""
        return max(1, int(round(1 / self.rate)))

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        with self._lock:
            self._buckets.clear()

    def _evict_idle(self, now: float) -> None:
        if now - self._last_sweep < self.idle_seconds:
            return
        stale = [key for key, bucket in self._buckets.items() if now - bucket.updated_at >= self.idle_seconds]
        for key in stale:
            del self._buckets[key]
        if stale:
            self.logger.debug(f"Evicted {len(stale)} idle rate limit buckets")
        self._last_sweep = now

    def __len__(self) -> int:
        return len(self._buckets)


class RedisTokenBucketStore:
    """Token buckets stored as Redis hashes, updated by a Lua script.

    Redis errors fail open: the request is allowed and the error logged.
    """

    # KEYS[1] bucket key
    # ARGV: capacity, rate (tokens/s), now (s), ttl (s)
    CONSUME_SCRIPT = """
    local capacity = tonumber(ARGV[1])
    local rate = tonumber(ARGV[2])
    local now = tonumber(ARGV[3])
    local ttl = tonumber(ARGV[4])
    local state = redis.call('HMGET', KEYS[1], 'tokens', 'ts')
    local tokens = tonumber(state[1])
    local ts = tonumber(state[2])
    if tokens == nil or ts == nil then
        tokens = capacity
        ts = now
    end
    tokens = math.min(capacity, tokens + math.max(0, now - ts) * rate)
    local allowed = 0
    if tokens >= 1 then
        tokens = tokens - 1
        allowed = 1
    end
    redis.call('HSET', KEYS[1], 'tokens', tostring(tokens), 'ts', tostring(now))
    redis.call('EXPIRE', KEYS[1], ttl)
    return allowed
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        capacity: int = 5,
        refill_seconds: float = 60.0,
        key_prefix: str = "shortlinks:ratelimit",
        client: Optional[redis.Redis] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        if client is None and redis_url is None:
            raise ValueError("Either redis_url or client must be provided")
        if capacity < 1:
            raise ValueError(f"Capacity must be at least 1 (given value: {capacity})")
        if refill_seconds <= 0:
            raise ValueError(f"Refill seconds must be positive (given value: {refill_seconds})")

        self.client = client or redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        self.capacity = capacity
        self.refill_seconds = refill_seconds
        self.rate = capacity / refill_seconds
        self.key_prefix = key_prefix
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self._consume = self.client.register_script(self.CONSUME_SCRIPT)

    def bucket_key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def consume(self, key: str) -> bool:
        """Take one token from the shared bucket for ``key``."""
        try:
            allowed = await self._consume(
                keys=[self.bucket_key(key)],
                args=[self.capacity, self.rate, self.clock(), int(self.refill_seconds) + 1],
            )
        except RedisError as e:
            self.logger.error(f"Rate limit check failed, allowing request: {e}")
            return True
        return int(allowed) == 1

    def retry_after(self) -> int:
        """Seconds until one token is back in an empty bucket."""
        return max(1, int(round(1 / self.rate)))

    async def health_check(self) -> bool:
        try:
            await self.client.ping()
            return True
        except RedisError as e:
            self.logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.aclose()
        self.logger.info("Redis connection closed")
