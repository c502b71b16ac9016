"""Mapping lifecycle service for short links."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Tuple

from .shortcode import ShortCodeGenerator
from .database.base import URLMappingStore
from .database.models import URLMapping
from .errors import CodeSpaceExhausted, DuplicateCodeError, Expired, NotFound


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class URLMappingService:
    """Creates, resolves, describes and expires URL mappings.

    The service holds no locks of its own. Each public operation runs in a
    single store transaction; the store's unique constraint on codes is the
    final guard against concurrent creators picking the same code.
    """

    def __init__(
        self,
        store: URLMappingStore,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        default_expiry_days: int = 30,
        max_collision_retries: int = 3,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the mapping service.

        Args:
            store: Mapping store
            short_code_generator: Optional short code generator
            logger: Optional logger
            default_expiry_days: Lifetime of mappings without an override
            max_collision_retries: Attempts at the default length before escalating
            clock: Returns the current UTC time
        """
        if default_expiry_days <= 0:
            raise ValueError(f"Default expiry days must be positive (given value: {default_expiry_days})")
        if max_collision_retries < 1:
            raise ValueError(f"Max collision retries must be at least 1 (given value: {max_collision_retries})")

        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.default_expiry_days = default_expiry_days
        self.max_collision_retries = max_collision_retries
        self.clock = clock

    async def create_short_url(
        self,
        long_url: str,
        expiry_days: Optional[int] = None,
    ) -> URLMapping:
        """Return the live mapping for a long URL, creating one if needed.

        Args:
            long_url: Well-formed absolute URL (validated by the caller)
            expiry_days: Optional lifetime override; ignored unless positive

        Returns:
            The live mapping

        Raises:
            CodeSpaceExhausted: If no free code could be found
            StorageUnavailable: On datastore failure
        """
        mapping, _ = await self.create_or_reuse(long_url, expiry_days)
        return mapping

    async def create_or_reuse(
        self,
        long_url: str,
        expiry_days: Optional[int] = None,
    ) -> Tuple[URLMapping, bool]:
        """Same as create_short_url, also reporting whether a row was written.

        Returns:
            Tuple of (mapping, created)
        """
        async with self.store.transaction():
            existing = await self.store.find_by_long_url(long_url)
            now = self.clock()

            if existing is not None:
                if not existing.is_expired(now):
                    self.logger.debug(f"Reusing live mapping: {existing.code} -> {long_url}")
                    return existing, False

                self.logger.info(f"Replacing expired mapping {existing.code} for {long_url}")
                await self.store.delete(existing)

            expires_at = self._compute_expiry(now, expiry_days)
            mapping = await self._insert_with_unique_code(long_url, now, expires_at)

        self.logger.info(f"Created short URL: {mapping.code} -> {long_url}")
        return mapping, True

    async def resolve(self, code: str) -> URLMapping:
        """Resolve a code for redirection, counting the hit.

        Args:
            code: The short code

        Returns:
            The mapping with its updated hit count

        Raises:
            NotFound: If the code is unknown (or vanished mid-resolve)
            Expired: If the mapping has expired; the hit count is left alone
            StorageUnavailable: On datastore failure
        """
        async with self.store.transaction():
            mapping = await self.store.find_by_code(code)
            if mapping is None:
                self.logger.warning(f"Short code not found: {code}")
                raise NotFound(code)

            if mapping.is_expired(self.clock()):
                self.logger.info(f"Short code expired: {code}")
                raise Expired(code)

            updated = await self.store.increment_hit_count(code)
            if updated is None:
                # Deleted by a concurrent cleanup between lookup and update
                raise NotFound(code)

        self.logger.debug(f"Resolved {code} -> {updated.long_url} (hits={updated.hit_count})")
        return updated

    async def get_metadata(self, code: str) -> URLMapping:
        """Get a mapping without touching its hit count.

        Expired mappings are returned as-is; callers read ``is_expired``.

        Raises:
            NotFound: If the code is unknown
            StorageUnavailable: On datastore failure
        """
        async with self.store.transaction():
            mapping = await self.store.find_by_code(code)

        if mapping is None:
            raise NotFound(code)
        return mapping

    async def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """Delete every mapping that expired before ``now``.

        Returns:
            Number of mappings removed
        """
        now = now or self.clock()
        async with self.store.transaction():
            removed = await self.store.delete_expired(now)

        if removed:
            self.logger.info(f"Cleaned up {removed} expired URLs")
        else:
            self.logger.debug("No expired URLs to clean up")
        return removed

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()

    def _compute_expiry(self, now: datetime, expiry_days: Optional[int]) -> datetime:
        days = expiry_days if expiry_days is not None and expiry_days > 0 else self.default_expiry_days
        return now + timedelta(days=days)

    async def _insert_with_unique_code(
        self,
        long_url: str,
        now: datetime,
        expires_at: datetime,
    ) -> URLMapping:
        """Insert a mapping under a fresh code.

        Tries ``max_collision_retries`` codes of the default length, then one
        code one character longer. A collision is either a hit on the
        existence check or a unique violation on insert.

        Raises:
            CodeSpaceExhausted: If the escalated code also collides
        """
        default_length = self.generator.default_length
        lengths = [default_length] * self.max_collision_retries + [default_length + 1]

        for attempt, length in enumerate(lengths, start=1):
            code = self.generator.generate(length)

            if await self.store.exists_by_code(code):
                self.logger.warning(f"Code collision detected for code: {code}, attempt: {attempt}")
                continue

            try:
                return await self.store.save(
                    URLMapping(
                        code=code,
                        long_url=long_url,
                        created_at=now,
                        expires_at=expires_at,
                        hit_count=0,
                    )
                )
            except DuplicateCodeError:
                self.logger.warning(f"Code collision on insert for code: {code}, attempt: {attempt}")

        raise CodeSpaceExhausted(
            f"Unable to generate unique short code after {len(lengths)} attempts "
            f"(lengths {default_length} and {default_length + 1})"
        )
