"""Access log middleware with request id propagation.

Each request gets an id (a well-formed incoming ``X-Request-ID`` is reused),
exposed on ``request.state`` and echoed on the response so client bug reports
can be matched to server logs.
"""

from __future__ import annotations

import logging
import re
import time
import uuid

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ecohouse.core.logging import env_bool

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Polled by load balancers; only failures are worth a line.
QUIET_PATHS = frozenset({"/health"})

logger = logging.getLogger("ecohouse.request")


def _request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER)
    if incoming and _REQUEST_ID_PATTERN.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex


def _log_level(status_code: int | None) -> int:
    # None means the app raised before producing a response.
    if status_code is None or status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id
        started = time.perf_counter()
        status_code: int | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            level = _log_level(status_code)
            path = request.url.path
            if level > logging.INFO or path not in QUIET_PATHS:
                duration_ms = round((time.perf_counter() - started) * 1000.0, 2)
                logger.log(
                    level,
                    "%s %s -> %s (%.2fms)",
                    request.method,
                    path,
                    status_code,
                    duration_ms,
                    extra={
                        "request_id": request_id,
                        "method": request.method,
                        "path": path,
                        "status_code": status_code,
                        "duration_ms": duration_ms,
                        "client_ip": request.client.host if request.client else None,
                    },
                )


def add_request_logging_middleware(app: FastAPI) -> None:
    """Attach the access log unless LOG_REQUESTS is turned off."""
    if env_bool("LOG_REQUESTS", default=True):
        app.add_middleware(RequestLoggingMiddleware)
