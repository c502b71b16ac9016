"""Validation utilities for short links."""

from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2048
ALLOWED_SCHEMES = ("http", "https")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a long URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str) or not url.strip():
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)
        # Accessing port validates it
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"

    # Check if scheme is http or https
    if result.scheme not in ALLOWED_SCHEMES:
        return False, "URL must use http or https protocol"

    # Check if netloc (domain) exists
    if not result.hostname:
        return False, "URL must have a valid domain"

    return True, ""


def is_valid_expiry_days(expiry_days) -> Tuple[bool, str]:
    """Validate an optional expiry override.

    Zero and negative values are accepted and mean "use the default".

    Args:
        expiry_days: Requested lifetime in days, or None

    Returns:
        Tuple of (is_valid, error_message)
    """
    if expiry_days is None:
        return True, ""

    if isinstance(expiry_days, bool) or not isinstance(expiry_days, int):
        return False, "Expiry days must be an integer"

    if expiry_days > 3650:
        return False, "Expiry days must be at most 3650"

    return True, ""
