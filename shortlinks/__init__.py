"""Core business logic for short links."""

from .shortcode import ShortCodeGenerator
from .service import URLMappingService
from .facade import ShortLinkFacade, ShortenResult
from .errors import (
    ShortLinkError,
    NotFound,
    Expired,
    InvalidInput,
    StorageUnavailable,
    CodeSpaceExhausted,
    DuplicateCodeError,
)

__all__ = [
    "ShortCodeGenerator",
    "URLMappingService",
    "ShortLinkFacade",
    "ShortenResult",
    "ShortLinkError",
    "NotFound",
    "Expired",
    "InvalidInput",
    "StorageUnavailable",
    "CodeSpaceExhausted",
    "DuplicateCodeError",
]
