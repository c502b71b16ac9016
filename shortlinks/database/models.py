"""Data models for the short link store."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


@dataclass
class URLMapping:
    """Represents a short code to long URL mapping."""

    code: str
    long_url: str
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    hit_count: int = 0
    id: Optional[int] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True if the mapping has an expiry strictly before ``now``."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return self.expires_at < now

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "code": self.code,
            "long_url": self.long_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "hit_count": self.hit_count,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "URLMapping":
        """Create from a database row or dictionary."""
        return cls(
            id=record.get("id"),
            code=record["code"],
            long_url=record["long_url"],
            created_at=_as_utc(record.get("created_at")),
            expires_at=_as_utc(record.get("expires_at")),
            hit_count=record.get("hit_count") or 0,
        )


def _as_utc(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
