"""
API Middleware - Request tracing, timing and error translation.

FileSiftError subclasses become JSON bodies of the form
{"error": {...}, "request_id": ...} with a status picked from the error code.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from filesift.config.errors import ErrorCode, FileSiftError

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.SEARCH_INVALID_QUERY: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.SEARCH_CANCELLED: 409,
    ErrorCode.SEARCH_INDEX_UNAVAILABLE: 503,
}


def error_code_to_status(code: ErrorCode) -> int:
    """HTTP status for an error code; unknown codes are server errors."""
    return _STATUS_BY_CODE.get(code, 500)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's request id or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
        logger.info(
            "%s %s -> %d in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            _request_id(request),
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions escaping a route into error JSON."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except FileSiftError as e:
            status = error_code_to_status(e.code)
            level = logging.ERROR if status >= 500 else logging.WARNING
            logger.log(
                level,
                "%s on %s: %s %s [%s]",
                e.code.value,
                request.url.path,
                e.message,
                e.details,
                _request_id(request),
            )
            return _error_response(request, status, e.to_dict())
        except Exception:
            logger.exception("Unhandled error on %s [%s]", request.url.path, _request_id(request))
            return _error_response(
                request,
                500,
                {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": "Internal server error",
                    "details": {},
                },
            )


def _error_response(request: Request, status: int, error: dict[str, Any]) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"error": error, "request_id": _request_id(request)},
    )
