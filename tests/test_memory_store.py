"""Tests for the in-memory mapping store."""

from datetime import datetime, timedelta, timezone

import pytest

from shortlinks.database.models import URLMapping
from shortlinks.errors import DuplicateCodeError

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _mapping(code, long_url="https://example.com", expires_in_days=30):
    return URLMapping(
        code=code,
        long_url=long_url,
        created_at=NOW,
        expires_at=NOW + timedelta(days=expires_in_days) if expires_in_days is not None else None,
    )


@pytest.mark.asyncio
class TestInMemoryStore:
    """Test InMemoryURLMappingStore."""

    async def test_save_assigns_id_and_finds_by_code(self, store):
        saved = await store.save(_mapping("abc123"))

        assert saved.id is not None
        found = await store.find_by_code("abc123")
        assert found == saved
        assert await store.exists_by_code("abc123")
        assert not await store.exists_by_code("zzz999")

    async def test_duplicate_code_rejected(self, store):
        await store.save(_mapping("abc123"))

        with pytest.raises(DuplicateCodeError):
            await store.save(_mapping("abc123", long_url="https://other.example.com"))

    async def test_returned_mappings_are_copies(self, store):
        saved = await store.save(_mapping("abc123"))
        saved.hit_count = 99

        found = await store.find_by_code("abc123")
        assert found.hit_count == 0

    async def test_find_by_long_url_prefers_latest_expiry(self, store):
        await store.save(_mapping("old111", expires_in_days=-1))
        await store.save(_mapping("new222", expires_in_days=10))

        found = await store.find_by_long_url("https://example.com")
        assert found.code == "new222"
        assert await store.find_by_long_url("https://missing.example.com") is None

    async def test_update_by_id(self, store):
        saved = await store.save(_mapping("abc123"))
        saved.hit_count = 5

        updated = await store.save(saved)
        assert updated.hit_count == 5
        assert (await store.find_by_code("abc123")).hit_count == 5

    async def test_delete(self, store):
        saved = await store.save(_mapping("abc123"))

        await store.delete(saved)
        assert await store.find_by_code("abc123") is None
        assert len(store) == 0

    async def test_delete_expired(self, store):
        await store.save(_mapping("gone11", expires_in_days=-1))
        await store.save(_mapping("live22", long_url="https://b.example.com"))
        await store.save(_mapping("perm33", long_url="https://c.example.com", expires_in_days=None))

        assert await store.delete_expired(NOW) == 1
        assert await store.delete_expired(NOW) == 0
        assert len(store) == 2

    async def test_increment_hit_count(self, store):
        await store.save(_mapping("abc123"))

        first = await store.increment_hit_count("abc123")
        second = await store.increment_hit_count("abc123")
        assert (first.hit_count, second.hit_count) == (1, 2)
        assert await store.increment_hit_count("missing") is None

    async def test_transaction_default_is_passthrough(self, store):
        async with store.transaction():
            await store.save(_mapping("abc123"))

        assert await store.exists_by_code("abc123")
        assert await store.health_check()
