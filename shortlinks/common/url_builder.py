"""URL building utilities for short links."""


def build_short_url(
    code: str,
    base_url: str,
    path_prefix: str = "/r",
) -> str:
    """Build complete short URL.

    Args:
        code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Redirect path prefix (e.g., /r)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{code}"
    return f"{base}/{code}"
