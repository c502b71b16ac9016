"""Redirect and metrics endpoints."""

from .routes import redirect_router, metrics_router

__all__ = ["redirect_router", "metrics_router"]
