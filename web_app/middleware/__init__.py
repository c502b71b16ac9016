"""Middleware for the shortlinks web app."""

from .logging import LoggingMiddleware
from .rate_limit import RateLimitMiddleware

__all__ = ["LoggingMiddleware", "RateLimitMiddleware"]
