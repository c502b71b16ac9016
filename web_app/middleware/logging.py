"""Access logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlinks.common.headers import resolve_client_ip


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes, with status and duration.

    5xx responses log at ERROR, 4xx at WARNING, everything else at INFO.
    Redirects add the target so hit traffic can be followed in the logs.
    """

    def __init__(self, app, trust_forwarded_for: bool = False, logger: logging.Logger = None):
        super().__init__(app)
        self.trust_forwarded_for = trust_forwarded_for
        self.logger = logger or logging.getLogger("shortlinks.web")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        client_ip = resolve_client_ip(
            request.headers,
            request.client.host if request.client else None,
            trust_forwarded_for=self.trust_forwarded_for,
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        target = response.headers.get("location")
        self.logger.log(
            level,
            f"{client_ip} {request.method} {request.url.path} -> {response.status_code} "
            f"in {duration_ms:.2f}ms" + (f" (location: {target})" if target else ""),
        )

        return response
