"""API routes implementation."""

from fastapi import APIRouter, Request, Response, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLMetadataResponse,
    HealthResponse,
    ErrorResponse,
)

router = APIRouter()


@router.post(
    "/urls",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": ShortenResponse, "description": "Existing live short URL reused"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        429: {"description": "Too many requests - rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a short URL, or return the live one already mapped to this long URL.",
)
async def create_short_url(request: Request, response: Response, body: ShortenRequest):
    """Create or reuse a short URL."""
    facade = request.app.state.facade

    result = await facade.shorten(body.long_url, body.expiry_days)

    if not result.created:
        response.status_code = status.HTTP_200_OK

    return ShortenResponse(code=result.mapping.code, short_url=result.short_url)


@router.get(
    "/urls/{code}",
    response_model=URLMetadataResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Get URL metadata",
    description="Get metadata of a short URL. Expired URLs are reported with expired=true.",
)
async def get_url_metadata(request: Request, code: str):
    """Get metadata of a short URL."""
    facade = request.app.state.facade

    metadata = await facade.fetch_metadata(code)

    return URLMetadataResponse(**metadata)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    facade = request.app.state.facade
    rate_limiter = getattr(request.app.state, "rate_limiter", None)

    health = await facade.service.health_check()

    if rate_limiter is None:
        limiter_status = "disabled"
    else:
        limiter_status = "healthy" if await rate_limiter.health_check() else "unhealthy"

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        rate_limiter=limiter_status,
        timestamp=datetime.now(timezone.utc),
    )
