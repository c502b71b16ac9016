"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.common.logging_config import setup_logging
from shortlinks.database.memory import InMemoryURLMappingStore
from shortlinks.facade import ShortLinkFacade
from shortlinks.ratelimit import InMemoryTokenBucketStore
from shortlinks.service import URLMappingService
from shortlinks.shortcode import ShortCodeGenerator
from web_app import create_app


class FakeClock:
    """Settable UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class ScriptedGenerator(ShortCodeGenerator):
    """Generator returning queued codes, then random ones."""

    def __init__(self, codes, default_length: int = 6):
        super().__init__(default_length=default_length)
        self.codes = list(codes)
        self.requested_lengths = []

    def generate(self, length=None) -> str:
        self.requested_lengths.append(length)
        if self.codes:
            return self.codes.pop(0)
        return super().generate(length)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(logger) -> InMemoryURLMappingStore:
    return InMemoryURLMappingStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(store, short_code_generator, logger, clock) -> URLMappingService:
    """Create service instance."""
    return URLMappingService(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
        default_expiry_days=30,
        max_collision_retries=3,
        clock=clock,
    )


@pytest.fixture
def facade(service, logger) -> ShortLinkFacade:
    return ShortLinkFacade(service=service, base_url="http://testserver", logger=logger)


@pytest.fixture
def config() -> Config:
    return Config(
        storage_backend="memory",
        base_url="http://testserver",
        rate_limit_enabled=True,
        rate_limit_tokens=5,
        rate_limit_refill_seconds=60,
    )


@pytest.fixture
def rate_limiter(config) -> InMemoryTokenBucketStore:
    return InMemoryTokenBucketStore(
        capacity=config.rate_limit_tokens,
        refill_seconds=config.rate_limit_refill_seconds,
    )


@pytest.fixture
def app(facade, rate_limiter, config):
    """Create test FastAPI app."""
    return create_app(
        facade_instance=facade,
        rate_limiter_instance=rate_limiter,
        config=config,
    )


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
