"""Map short link errors to HTTP responses."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlinks.errors import (
    CodeSpaceExhausted,
    Expired,
    InvalidInput,
    NotFound,
    StorageUnavailable,
)

logger = logging.getLogger("shortlinks.web")


def error_response(request: Request, status_code: int, title: str, message: str) -> JSONResponse:
    """Build the JSON error body shared by all handlers."""
    return JSONResponse(
        status_code=status_code,
        content={
            "title": title,
            "status": status_code,
            "message": message,
            "instance": request.url.path,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        },
    )


async def handle_not_found(request: Request, exc: NotFound) -> JSONResponse:
    return error_response(request, status.HTTP_404_NOT_FOUND, "Not Found", str(exc))


async def handle_expired(request: Request, exc: Expired) -> JSONResponse:
    return error_response(request, status.HTTP_410_GONE, "Gone", str(exc))


async def handle_invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Bad Request", str(exc))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Bad Request", problems or "Invalid request")


async def handle_storage_unavailable(request: Request, exc: StorageUnavailable) -> JSONResponse:
    logger.error(f"Storage unavailable on {request.method} {request.url.path}: {exc}")
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "Storage is temporarily unavailable",
    )


async def handle_code_space_exhausted(request: Request, exc: CodeSpaceExhausted) -> JSONResponse:
    logger.error(f"Code space exhausted on {request.method} {request.url.path}: {exc}")
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "Unable to allocate a short code",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFound, handle_not_found)
    app.add_exception_handler(Expired, handle_expired)
    app.add_exception_handler(InvalidInput, handle_invalid_input)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StorageUnavailable, handle_storage_unavailable)
    app.add_exception_handler(CodeSpaceExhausted, handle_code_space_exhausted)
