"""Header parsing utilities for short links."""

from typing import Dict, Mapping, Optional


def extract_forwarded_headers(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers mapping

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    # Convert headers to lowercase for case-insensitive lookup
    headers_lower = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def resolve_client_ip(
    headers: Mapping[str, str],
    peer_host: Optional[str],
    trust_forwarded_for: bool = False,
) -> str:
    """Pick the address a request is attributed to.

    Priority:
    1. First hop of X-Forwarded-For (only when the proxy is trusted)
    2. Socket peer address
    3. "unknown"

    Args:
        headers: Request headers
        peer_host: Address of the connected peer
        trust_forwarded_for: Whether X-Forwarded-For is set by a trusted proxy

    Returns:
        Client IP string
    """
    if trust_forwarded_for:
        forwarded_for = extract_forwarded_headers(headers)["forwarded_for"]
        if forwarded_for:
            first_hop = forwarded_for.split(",")[0].strip()
            if first_hop:
                return first_hop

    return peer_host or "unknown"
