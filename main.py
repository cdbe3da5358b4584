"""
Job Application Tracker — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware import register_middleware
from api.routes import health_router
from api.routes import router as api_router
from auth.cookies import SessionCookie
from auth.jwt import TokenService
from auth.routes import router as auth_router
from config.settings import Settings
from database.session import build_engine, build_session_factory, create_tables

API_PREFIX = "/api/v1"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncpg", "httpx", "httpcore"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not settings.jwt_secret:
            logger.warning("JWT_SECRET is not set — every session token will be rejected")
        if settings.auto_create_tables:
            await create_tables(engine)
            logger.info("Database tables ensured")
        logger.info("Application ready to accept requests.")
        yield
        await engine.dispose()

    app = FastAPI(
        title="Job Application Tracker",
        version="1.0.0",
        description="Track job applications, contacts and interviews.",
        lifespan=lifespan,
    )

    # Process-wide, read-only after startup.
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)
    app.state.session_cookie = SessionCookie(
        secure=settings.cookie_secure,
        name=settings.session_cookie_name,
        max_age=settings.jwt_expiry_seconds,
    )

    setup_exception_handlers(app)
    register_middleware(app, API_PREFIX)

    # CORS outermost so preflight requests never reach the gate.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(auth_router, prefix=f"{API_PREFIX}/auth")
    app.include_router(api_router, prefix=API_PREFIX)
    app.include_router(health_router)

    return app


if __name__ == "__main__":
    config = Settings()
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
