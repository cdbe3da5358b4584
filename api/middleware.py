"""
Global middleware: request timing and the authentication gate.
"""

from __future__ import annotations

import logging
import time
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from auth.dependencies import NOT_AUTHENTICATED

logger = logging.getLogger(__name__)

LOGIN_PAGE = "/login"
PUBLIC_PAGES = ("/login", "/register")
PROTECTED_PAGES = ("/dashboard",)


class RouteClass(str, Enum):
    PUBLIC_PAGE = "public_page"
    PUBLIC_API = "public_api"
    PROTECTED_PAGE = "protected_page"
    PROTECTED_API = "protected_api"


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def api_root(api_prefix: str) -> str:
    """First segment of the API prefix: ``/api/v1`` → ``/api``."""
    return "/" + api_prefix.strip("/").split("/")[0]


def classify_path(path: str, api_prefix: str) -> RouteClass:
    """Decide whether ``path`` needs a verified session before any handler runs."""
    public_api = (f"{api_prefix}/auth/login", f"{api_prefix}/auth/register")
    if any(_under(path, route) for route in public_api):
        return RouteClass.PUBLIC_API
    if any(_under(path, route) for route in PUBLIC_PAGES):
        return RouteClass.PUBLIC_PAGE
    if _under(path, api_root(api_prefix)):
        return RouteClass.PROTECTED_API
    if any(_under(path, route) for route in PROTECTED_PAGES):
        return RouteClass.PROTECTED_PAGE
    # Landing page, health check, docs.
    return RouteClass.PUBLIC_PAGE


class RequestGate:
    """
    Rejects protected requests that do not carry a verifiable session token.

    The gate only proves that *some* valid token was presented. Handlers still
    resolve the user themselves and apply their own ownership checks.
    """

    def __init__(self, api_prefix: str):
        self.api_prefix = api_prefix

    async def __call__(self, request: Request, call_next):
        route = classify_path(request.url.path, self.api_prefix)
        if route in (RouteClass.PUBLIC_PAGE, RouteClass.PUBLIC_API):
            return await call_next(request)

        state = request.app.state
        token = state.session_cookie.read(request)
        if token is not None and state.token_service.verify(token) is not None:
            return await call_next(request)

        logger.debug(
            "Gate rejected %s %s (%s)",
            request.method,
            request.url.path,
            "no token" if token is None else "invalid token",
        )
        if route is RouteClass.PROTECTED_PAGE:
            return RedirectResponse(LOGIN_PAGE, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
        return JSONResponse(
            {"error": NOT_AUTHENTICATED},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


def register_middleware(app: FastAPI, api_prefix: str) -> None:
    """Attach app-level middleware. The gate runs inside the timer."""

    app.middleware("http")(RequestGate(api_prefix))

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response
