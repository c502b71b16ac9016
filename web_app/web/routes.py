"""Redirect and metrics routes implementation."""

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ..api.schemas import ErrorResponse

redirect_router = APIRouter()
metrics_router = APIRouter()


@redirect_router.get(
    "/{code}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    responses={
        302: {"description": "Redirect to the original URL (Location header)"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
        410: {"model": ErrorResponse, "description": "Short code has expired"},
    },
    summary="Redirect to original URL",
    tags=["Redirect"],
)
async def redirect_to_url(request: Request, code: str):
    """Redirect to the original URL, counting the hit."""
    facade = request.app.state.facade

    long_url = await facade.resolve_for_redirect(code)

    # 302, not 301: every visit has to reach the hit counter
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)


@metrics_router.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus exposition of process metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
