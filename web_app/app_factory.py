"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .web import redirect_router, metrics_router
from .errors import register_exception_handlers
from .middleware.logging import LoggingMiddleware
from .middleware.rate_limit import RateLimitMiddleware


def create_app(
    facade_instance,
    rate_limiter_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        facade_instance: ShortLinkFacade (may be set later by the lifespan)
        rate_limiter_instance: Token bucket store, or None to disable throttling
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="Short URL service with expiring links and hit counting",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.facade = facade_instance
    app.state.rate_limiter = rate_limiter_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Added last runs first: requests are logged before being throttled
    app.add_middleware(
        RateLimitMiddleware,
        path="/api/urls",
        method="POST",
        trust_forwarded_for=config.rate_limit_trust_forwarded_for,
    )
    app.add_middleware(
        LoggingMiddleware,
        trust_forwarded_for=config.rate_limit_trust_forwarded_for,
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api", tags=["API"])
    if config.metrics_enabled:
        app.include_router(metrics_router)
    app.include_router(redirect_router, prefix=config.redirect_prefix.rstrip("/"))

    return app
