"""Per-client rate limiting of short URL creation."""

import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Callable

from shortlinks.common.headers import resolve_client_ip


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Throttle POST requests to the create endpoint with token buckets.

    The limiter is read from ``app.state.rate_limiter`` on every request;
    when it is None all requests pass.
    """

    def __init__(
        self,
        app,
        path: str = "/api/urls",
        method: str = "POST",
        trust_forwarded_for: bool = False,
        logger: logging.Logger = None,
    ):
        super().__init__(app)
        self.path = path.rstrip("/")
        self.method = method.upper()
        self.trust_forwarded_for = trust_forwarded_for
        self.logger = logger or logging.getLogger("shortlinks.web")

    async def dispatch(self, request: Request, call_next: Callable):
        limiter = getattr(request.app.state, "rate_limiter", None)

        if (
            limiter is None
            or request.method.upper() != self.method
            or request.url.path.rstrip("/") != self.path
        ):
            return await call_next(request)

        client_ip = resolve_client_ip(
            request.headers,
            request.client.host if request.client else None,
            trust_forwarded_for=self.trust_forwarded_for,
        )

        if await limiter.consume(client_ip):
            return await call_next(request)

        self.logger.warning(f"Rate limit exceeded for {client_ip} on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=429,
            media_type="application/problem+json",
            headers={"Retry-After": str(limiter.retry_after())},
            content={
                "title": "Too Many Requests",
                "status": 429,
                "detail": (
                    f"Rate limit exceeded. Max {limiter.capacity} requests "
                    f"per {limiter.refill_seconds:g} seconds."
                ),
            },
        )
