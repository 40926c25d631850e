"""Exception handlers that give every error the same body.

Every error leaves the service as ``{"type": ..., "message": ...}``; log
records carry the request id set by the access log middleware.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecohouse.core.exceptions import AppException, RateLimitError

logger = logging.getLogger("ecohouse.exception")


def error_response(
    status_code: int,
    error_type: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"type": error_type, "message": message},
        headers=headers,
    )


def _log_extra(request: Request, status_code: int, error_type: str) -> dict:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "error_type": error_type,
    }


def _flatten(exc: RequestValidationError) -> str:
    """``field: msg`` pairs joined with ``; ``; body-level errors have no field."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        parts.append(f"{field}: {error['msg']}" if field else error["msg"])
    return "; ".join(parts)


def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "%s: %s",
        exc.error_type,
        exc.message,
        extra=_log_extra(request, exc.status_code, exc.error_type),
    )

    headers = None
    if isinstance(exc, RateLimitError) and exc.retry_after is not None:
        headers = {"Retry-After": str(exc.retry_after)}
    return error_response(exc.status_code, exc.error_type, exc.message, headers)


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, "http_error", str(exc.detail))


def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(422, "validation_error", _flatten(exc))


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        extra=_log_extra(request, 500, "internal_error"),
        exc_info=exc,
    )
    return error_response(500, "internal_error", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
