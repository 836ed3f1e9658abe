# moviereview/main.py
from __future__ import annotations

"""
# Movie Review API — Application Entrypoint (FastAPI)

ASGI application factory and lifecycle.

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Explicit **middleware registration order** (the last one added runs outermost):
  1) request id, 2) security headers, 3) CORS, 4) gzip, 5) rate limits,
  6) strip `Server` header.
- Centralized problem+json exception handling. 500s are rendered by
  `ServerErrorMiddleware` outside this stack, so the handler sets `X-Request-ID` itself.

## Probes
- `/healthz` — liveness (process up).
- `/readyz` — readiness (quick DB check).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.responses import JSONResponse, Response

# -- Logging bootstrap (Loguru + stdlib intercept) ----------------------------
from moviereview.core import logger as _logsetup  # noqa: F401

from moviereview.api.v1 import router as api_v1_router
from moviereview.core.config import settings
from moviereview.core.exception_handlers import (
    global_exception_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    validation_exception_handler,
)
from moviereview.core.limiter import install_rate_limiter, rate_limit_exempt
from moviereview.db.session import async_engine, create_tables, db_healthcheck, session_scope
from moviereview.middleware.request_id import RequestIDMiddleware
from moviereview.security_headers import configure_cors, install_security
from moviereview.services import user_service

logger = logging.getLogger("moviereview")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
async def bootstrap_admin() -> None:
    """Create the configured ADMIN account if it does not exist yet."""
    if not settings.bootstrap_admin_configured:
        return
    async with session_scope() as db:
        admin = await user_service.ensure_admin(
            db,
            username=settings.BOOTSTRAP_ADMIN_USERNAME,
            password=settings.BOOTSTRAP_ADMIN_PASSWORD.get_secret_value(),
            email=settings.BOOTSTRAP_ADMIN_EMAIL,
        )
    logger.info("Bootstrap admin ready: id=%s username=%r", admin.id, admin.username)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup:
        - Create tables when `DB_AUTO_CREATE` is on.
        - Ensure the bootstrap admin account when configured.

    Shutdown:
        - Dispose the async engine.
    """
    logger.info("✅ %s starting up (env=%s)", settings.PROJECT_NAME, settings.ENV)
    if settings.DB_AUTO_CREATE:
        await create_tables()
        logger.info("Database tables ensured")
    await bootstrap_admin()

    try:
        yield
    finally:
        await async_engine.dispose()
        logger.info("🛑 Database engine disposed; %s shutting down", settings.PROJECT_NAME)


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Returns:
        FastAPI: application with middleware, exception handlers, routers,
        and health/readiness endpoints.
    """
    enable_docs = settings.ENABLE_DOCS and not settings.is_production
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
        openapi_url="/openapi.json" if enable_docs else None,
        lifespan=lifespan,
    )

    # ── Middlewares (order matters) ─────────────────────────────────────────
    app.add_middleware(RequestIDMiddleware)  # 1) Correlation ID
    install_security(app)                    # 2) Security headers
    configure_cors(app)                      # 3) CORS allow-list
    app.add_middleware(GZipMiddleware, minimum_size=1024)  # 4) GZip

    # 5) Rate limiter (SlowAPI middleware + 429 handler)
    install_rate_limiter(app)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # 6) Strip the Server header at the end of the chain
    @app.middleware("http")
    async def _strip_server_header(request: Request, call_next: Callable) -> Response:
        response: Response = await call_next(request)
        if "server" in response.headers:
            del response.headers["server"]
        return response

    # ── Exception handlers ──────────────────────────────────────────────────
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)           # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)             # type: ignore[arg-type]

    # ── Routers (versioned API) ─────────────────────────────────────────────
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    # ── Meta endpoints ──────────────────────────────────────────────────────
    @app.get("/healthz", tags=["meta"])
    @rate_limit_exempt()
    async def healthz() -> dict[str, bool]:
        """Liveness probe: `{"ok": True}` when the process is responsive."""
        return {"ok": True}

    @app.get("/readyz", tags=["meta"])
    @rate_limit_exempt()
    async def readyz() -> JSONResponse:
        """Readiness probe: 200 when the database answers `SELECT 1`, else 503."""
        db_ok = await db_healthcheck()
        return JSONResponse(
            {"ready": db_ok, "checks": {"db": db_ok}},
            status_code=200 if db_ok else 503,
        )

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        return JSONResponse(
            {"name": settings.PROJECT_NAME, "docs": app.docs_url or "", "version": settings.VERSION}
        )

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app", "lifespan"]


# Local dev runner (prefer: `uvicorn moviereview.main:app --reload`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "moviereview.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
        workers=int(os.getenv("WORKERS", "1")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
