"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Every handler renders the
response envelope {success: false, message, code, errors?}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal_api.core.config import get_settings
from portal_api.core.errors import AuthError, PortalError, RateLimited

logger = logging.getLogger(__name__)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def error_body(
    message: str, code: str, errors: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message, "code": code}
    if errors:
        body["errors"] = errors
    return body


def _portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Map a domain error to its status; 401s carry the Bearer challenge."""
    headers = BEARER_CHALLENGE if isinstance(exc, AuthError) else None
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code, exc.errors),
        headers=headers,
    )


def _field_name(loc: tuple[Any, ...] | list[Any]) -> str:
    # Drop the leading "body"/"query"/"path" marker.
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one {field, message} entry per validation error."""
    errors = [
        {"field": _field_name(e.get("loc", ())), "message": e.get("msg", "")} for e in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", "ValidationError", errors),
    )


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded for %s on %s", request.client, request.url.path)
    return JSONResponse(
        status_code=RateLimited.status_code,
        content=error_body(RateLimited.default_message, "RateLimited"),
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return the envelope for framework HTTP errors (unknown route, wrong method)."""
    headers = getattr(exc, "headers", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), "HTTPError"),
        headers=headers,
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when DEBUG is True."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().DEBUG else "Internal server error"
    return JSONResponse(status_code=500, content=error_body(message, "InternalError"))


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app. Call once after creating the app."""
    app.add_exception_handler(PortalError, _portal_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
