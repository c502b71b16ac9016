"""Prometheus metrics for short links."""

from prometheus_client import Counter

REDIRECT_COUNTER = Counter(
    "shortener_redirect_total",
    "Total number of URL redirects",
)

CREATED_COUNTER = Counter(
    "shortener_urls_created_total",
    "Total number of short URLs created",
)
