"""API middleware: CORS, request logging, and error handling.

# ─── EXECUTION ORDER ──────────────────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed):
#
#     app.add_middleware(RequestLoggingMiddleware)   # outermost
#     configure_cors(app)
#
# PollenTrackerError subclasses are turned into JSON ErrorResponse bodies
# by exception handlers registered with ``register_error_handlers``, so
# RequestLoggingMiddleware sees the final status code.
#
# Fault kind → HTTP status:
#     invalid-argument  400
#     unauthenticated   401
#     internal          500
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import PollenTrackerError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_REQUEST_ID_HEADER = "X-Request-ID"

_STATUS_BY_KIND = {
    "invalid-argument": 400,
    "unauthenticated": 401,
    "internal": 500,
}


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Bearer tokens travel in the Authorization header, not cookies, so
    credentials are only allowed when the origins are listed explicitly.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once, with a request id bound for its duration.

    The id is taken from an incoming ``X-Request-ID`` header when present
    and echoed back on the response.  Every log line emitted while the
    request is handled (store writes, lookups, analysis) carries it via
    ``structlog.contextvars``.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(_REQUEST_ID_HEADER) or uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            response.headers[_REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=response.status_code if response else 500,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


async def handle_application_error(request: Request, exc: Exception) -> JSONResponse:
    """Convert a ``PollenTrackerError`` into a sanitized JSON error.

    The full error is logged server-side; the client only sees the fault
    kind and the error message, never a stack trace.
    """
    if not isinstance(exc, PollenTrackerError):
        raise exc

    status_code = _STATUS_BY_KIND.get(exc.kind, 500)
    log = _logger.error if status_code >= 500 else _logger.warning
    log(
        "application_error",
        error_type=type(exc).__name__,
        kind=exc.kind,
        message=exc.message,
        provider=exc.provider_name,
        path=str(request.url.path),
    )
    body = ErrorResponse(error=exc.kind, detail=exc.message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """Install the PollenTrackerError handler on *app*."""
    app.add_exception_handler(PollenTrackerError, handle_application_error)
