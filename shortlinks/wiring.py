"""Build stores, services and limiters from a Config instance."""

import logging
from typing import Optional, Union

from .database.base import URLMappingStore
from .database.memory import InMemoryURLMappingStore
from .database.postgres import PostgresURLMappingStore
from .facade import ShortLinkFacade
from .ratelimit import InMemoryTokenBucketStore, RedisTokenBucketStore
from .service import URLMappingService
from .shortcode import ShortCodeGenerator

RateLimiter = Union[InMemoryTokenBucketStore, RedisTokenBucketStore]


def build_store(config, logger: logging.Logger) -> URLMappingStore:
    if config.storage_backend == "memory":
        logger.warning("Using in-memory store; mappings are lost on restart")
        return InMemoryURLMappingStore(logger=logger)

    logger.info(f"Using PostgreSQL store at {config.database_url.rsplit('@', 1)[-1]}")
    return PostgresURLMappingStore(
        db_config=config.database_url,
        pool_max_size=config.db_pool_max_size,
        timeout_seconds=config.db_timeout_seconds,
        logger=logger,
    )


def build_service(config, store: URLMappingStore, logger: logging.Logger) -> URLMappingService:
    return URLMappingService(
        store=store,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        default_expiry_days=config.default_expiry_days,
        max_collision_retries=config.max_collision_retries,
    )


def build_facade(config, service: URLMappingService, logger: logging.Logger) -> ShortLinkFacade:
    return ShortLinkFacade(
        service=service,
        base_url=config.base_url,
        redirect_prefix=config.redirect_prefix,
        logger=logger,
    )


def build_rate_limiter(config, logger: logging.Logger) -> Optional[RateLimiter]:
    if not config.rate_limit_enabled:
        logger.info("Rate limiting disabled")
        return None

    if config.redis_url:
        logger.info(f"Rate limit buckets stored in Redis at {config.redis_url.rsplit('@', 1)[-1]}")
        return RedisTokenBucketStore(
            redis_url=config.redis_url,
            capacity=config.rate_limit_tokens,
            refill_seconds=config.rate_limit_refill_seconds,
            logger=logger,
        )

    logger.info("Rate limit buckets stored in process memory")
    return InMemoryTokenBucketStore(
        capacity=config.rate_limit_tokens,
        refill_seconds=config.rate_limit_refill_seconds,
        idle_seconds=config.rate_limit_idle_seconds,
        logger=logger,
    )
