"""In-memory store for local development and tests."""

import asyncio
import dataclasses
import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from ..errors import DuplicateCodeError
from .base import URLMappingStore
from .models import URLMapping


class InMemoryURLMappingStore(URLMappingStore):
    """Process-local URL mapping store.

    Rows live in a dict keyed by code behind an asyncio lock, which plays the
    part of the unique constraint. Returned mappings are copies.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._rows: Dict[str, URLMapping] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def find_by_code(self, code: str) -> Optional[URLMapping]:
        async with self._lock:
            row = self._rows.get(code)
            return dataclasses.replace(row) if row else None

    async def find_by_long_url(self, long_url: str) -> Optional[URLMapping]:
        async with self._lock:
            candidates = [row for row in self._rows.values() if row.long_url == long_url]
            if not candidates:
                return None
            # Latest expiry first, never-expiring rows ahead of everything
            best = max(
                candidates,
                key=lambda row: (row.expires_at is None, row.expires_at or row.created_at),
            )
            return dataclasses.replace(best)

    async def exists_by_code(self, code: str) -> bool:
        async with self._lock:
            return code in self._rows

    async def save(self, mapping: URLMapping) -> URLMapping:
        async with self._lock:
            if mapping.id is None:
                if mapping.code in self._rows:
                    raise DuplicateCodeError(mapping.code)
                row = dataclasses.replace(
                    mapping,
                    id=next(self._ids),
                    created_at=mapping.created_at or datetime.now(timezone.utc),
                )
            else:
                current = self._rows.get(mapping.code)
                if current is None or current.id != mapping.id:
                    self.logger.warning(f"Update of missing mapping ignored: {mapping.code}")
                    return dataclasses.replace(mapping)
                row = dataclasses.replace(mapping)
            self._rows[row.code] = row
            return dataclasses.replace(row)

    async def delete(self, mapping: URLMapping) -> None:
        async with self._lock:
            current = self._rows.get(mapping.code)
            if current is not None and (mapping.id is None or current.id == mapping.id):
                del self._rows[mapping.code]

    async def delete_expired(self, now: datetime) -> int:
        async with self._lock:
            expired = [
                code for code, row in self._rows.items()
                if row.expires_at is not None and row.expires_at < now
            ]
            for code in expired:
                del self._rows[code]
            return len(expired)

    async def increment_hit_count(self, code: str) -> Optional[URLMapping]:
        async with self._lock:
            row = self._rows.get(code)
            if row is None:
                return None
            row.hit_count += 1
            return dataclasses.replace(row)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        async with self._lock:
            self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)
