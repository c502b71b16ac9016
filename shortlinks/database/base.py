"""Abstract base class for short link store implementations."""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional

from .models import URLMapping


class URLMappingStore(ABC):
    """Abstract base class for URL mapping storage.

    Every operation is atomic with respect to a single mapping. Failures to
    reach the datastore surface as ``StorageUnavailable``.
    """

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run the enclosed store calls as one unit of work.

        Stores without multi-statement transactions keep this default, where
        each call is atomic on its own.
        """
        yield

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[URLMapping]:
        """Get the mapping for a short code.

        Args:
            code: The short code to lookup

        Returns:
            The mapping if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_long_url(self, long_url: str) -> Optional[URLMapping]:
        """Get a mapping for a long URL.

        A live mapping is returned whenever one exists. An expired one may be
        returned when no live mapping is left; callers re-check expiry.

        Args:
            long_url: The original long URL

        Returns:
            The mapping if found, None otherwise
        """
        pass

    @abstractmethod
    async def exists_by_code(self, code: str) -> bool:
        """Check if a short code is already taken.

        Args:
            code: The short code to check

        Returns:
            True if exists, False otherwise
        """
        pass

    @abstractmethod
    async def save(self, mapping: URLMapping) -> URLMapping:
        """Insert a new mapping or update an existing one.

        Mappings without an ``id`` are inserted; the store assigns ``id`` and,
        when missing, ``created_at``. Mappings with an ``id`` are updated.

        Args:
            mapping: The mapping to persist

        Returns:
            The persisted mapping

        Raises:
            DuplicateCodeError: If an insert collides with an existing code
        """
        pass

    @abstractmethod
    async def delete(self, mapping: URLMapping) -> None:
        """Delete a mapping.

        Args:
            mapping: The mapping to delete
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete every mapping whose expiry is before ``now``.

        Args:
            now: Reference time

        Returns:
            Number of mappings removed
        """
        pass

    @abstractmethod
    async def increment_hit_count(self, code: str) -> Optional[URLMapping]:
        """Atomically add one to the hit count of a mapping.

        Args:
            code: The short code to update

        Returns:
            The updated mapping, or None if it no longer exists
        """
        pass

    async def create_tables(self) -> None:
        """Create the backing schema if the store needs one."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release store resources."""
        pass
