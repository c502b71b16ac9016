"""Read and write paths used by the HTTP layer and the CLI."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .common.url_builder import build_short_url
from .common.validators import is_valid_expiry_days, is_valid_url
from .database.models import URLMapping
from .errors import InvalidInput, NotFound
from .metrics import CREATED_COUNTER, REDIRECT_COUNTER
from .service import URLMappingService


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a shorten request."""

    mapping: URLMapping
    short_url: str
    created: bool


class ShortLinkFacade:
    """Translate lifecycle results into redirect and metadata responses."""

    def __init__(
        self,
        service: URLMappingService,
        base_url: str,
        redirect_prefix: str = "/r",
        logger: Optional[logging.Logger] = None,
    ):
        self.service = service
        self.base_url = base_url
        self.redirect_prefix = redirect_prefix
        self.logger = logger or logging.getLogger(__name__)

    def short_url_for(self, code: str) -> str:
        return build_short_url(code, self.base_url, self.redirect_prefix)

    async def shorten(self, long_url: str, expiry_days: Optional[int] = None) -> ShortenResult:
        """Validate input, then create or reuse a mapping.

        Raises:
            InvalidInput: If the URL or expiry override is malformed
        """
        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            raise InvalidInput(f"Invalid URL: {error}")

        is_valid, error = is_valid_expiry_days(expiry_days)
        if not is_valid:
            raise InvalidInput(error)

        mapping, created = await self.service.create_or_reuse(long_url, expiry_days)
        if created:
            CREATED_COUNTER.inc()

        return ShortenResult(
            mapping=mapping,
            short_url=self.short_url_for(mapping.code),
            created=created,
        )

    async def resolve_for_redirect(self, code: str) -> str:
        """Resolve a code to the URL to redirect to.

        Malformed codes are reported as NotFound without a store lookup.

        Raises:
            NotFound, Expired, StorageUnavailable
        """
        if not self.service.generator.is_valid_format(code):
            raise NotFound(code)

        mapping = await self.service.resolve(code)
        REDIRECT_COUNTER.inc()
        return mapping.long_url

    async def fetch_metadata(self, code: str) -> Dict[str, Any]:
        """Describe a mapping; expired mappings are reported, not rejected.

        Raises:
            NotFound, StorageUnavailable
        """
        if not self.service.generator.is_valid_format(code):
            raise NotFound(code)

        mapping = await self.service.get_metadata(code)
        return {
            "code": mapping.code,
            "long_url": mapping.long_url,
            "short_url": self.short_url_for(mapping.code),
            "created_at": mapping.created_at,
            "expires_at": mapping.expires_at,
            "hit_count": mapping.hit_count,
            "expired": mapping.is_expired(self.service.clock()),
        }
