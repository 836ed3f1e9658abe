from __future__ import annotations

"""
Problem+JSON exception handlers (RFC 7807).

Registered by `moviereview.main.create_app`. HTTP errors, validation failures,
rate-limit rejections and unhandled errors all leave the API as
`application/problem+json` with a stable schema; typed application errors
also carry `code` and, when present, `details`. Unhandled errors also echo
the request id, since their response bypasses `RequestIDMiddleware`.
"""

import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from moviereview.core.exceptions import AppException
from moviereview.middleware.request_id import HEADER_NAME as REQUEST_ID_HEADER, get_request_id

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _problem(title: str, detail: str, status_code: int, request: Request, **extra) -> JSONResponse:
    content = {
        "type": "about:blank",
        "title": title,
        "detail": detail,
        "status": status_code,
        "instance": str(request.url),
    }
    content.update(extra)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(content),
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # type: ignore
    title = exc.__class__.__name__.replace("Exception", "").strip() or "Error"
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    extra = exc.to_problem() if isinstance(exc, AppException) else {}
    response = _problem(title, detail, exc.status_code, request, **extra)
    for key, value in (getattr(exc, "headers", None) or {}).items():
        response.headers[key] = value
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore
    return _problem(
        "Validation error",
        "Request validation failed",
        status.HTTP_400_BAD_REQUEST,
        request,
        errors=exc.errors(),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    response = _problem(
        "Too Many Requests",
        f"Rate limit exceeded: {exc.detail}",
        status.HTTP_429_TOO_MANY_REQUESTS,
        request,
    )
    limiter = getattr(request.app.state, "limiter", None)
    current_limit = getattr(request.state, "view_rate_limit", None)
    if limiter is not None and current_limit is not None:
        response = limiter._inject_headers(response, current_limit)
    return response


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # type: ignore
    request_id = get_request_id(request)
    logger.exception("Unhandled error on %s %s (request_id=%s)", request.method, request.url.path, request_id)
    response = _problem(
        "Internal Server Error",
        "An unexpected error occurred.",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        request,
        request_id=request_id or None,
    )
    # Sent by ServerErrorMiddleware, outside RequestIDMiddleware
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


__all__ = [
    "http_exception_handler",
    "validation_exception_handler",
    "rate_limit_exceeded_handler",
    "global_exception_handler",
]
