"""
Centralized exception handlers.

Every error leaves the API as ``{"error": "<message>"}``:

* ``HTTPException``          → its status code and detail
* request validation errors  → 400 with the first offending field
* store / signing failures   → 500 with a generic message (details logged)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.jwt import TokenServiceUnavailable

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def format_validation_error(exc: RequestValidationError) -> str:
    """Render the first validation error as ``"<field>: <message>"``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = str(first.get("msg", "Invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    if not location:
        return message
    return f"{'.'.join(location)}: {message}"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, format_validation_error(exc))


async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


async def token_service_exception_handler(request: Request, exc: TokenServiceUnavailable) -> JSONResponse:
    logger.error("Cannot issue session token: %s", exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(TokenServiceUnavailable, token_service_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
