"""Common utilities for short links."""

from .validators import is_valid_url, is_valid_expiry_days
from .headers import extract_forwarded_headers, resolve_client_ip
from .url_builder import build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_expiry_days",
    "extract_forwarded_headers",
    "resolve_client_ip",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
