# moviereview/security_headers.py
from __future__ import annotations

"""
# Movie Review API — Security Headers & CORS

## What you get
- **Headers**: X-Content-Type-Options, X-Frame-Options, Referrer-Policy,
  Cross-Origin-Opener-Policy on every response.
- **CORS installer**: allow-list from `settings.FRONTEND_ORIGINS` (localhost defaults in dev).
- **Cache helper**: `set_sensitive_cache()` for token-bearing responses.

## Quick start
    app = FastAPI()
    install_security(app)
    configure_cors(app)
"""

import os
from typing import Iterable, List, Optional

from fastapi import Response
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from moviereview.core.config import settings

_DEFAULT_HEADERS = {
    b"x-content-type-options": b"nosniff",
    b"x-frame-options": b"DENY",
    b"referrer-policy": os.getenv("REFERRER_POLICY", "strict-origin-when-cross-origin").encode("latin-1"),
    b"cross-origin-opener-policy": b"same-origin",
}

_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


# ─────────────────────────────────────────────────────────────
# 🧩 Middleware
# ─────────────────────────────────────────────────────────────
class SecurityHeadersMiddleware:
    """Apply static security headers without overriding ones a route already set."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        async def _send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                headers = list(message.get("headers", []))
                present = {k.lower() for k, _ in headers}
                headers.extend((k, v) for k, v in _DEFAULT_HEADERS.items() if k not in present)
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, _send_wrapper)


# ─────────────────────────────────────────────────────────────
# 🗄️ Cache helper
# ─────────────────────────────────────────────────────────────
def set_sensitive_cache(response: Response) -> None:
    """Forbid caching of a response that carries credentials or tokens."""
    response.headers["Cache-Control"] = "no-store"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"


# ─────────────────────────────────────────────────────────────
# 🌐 CORS installer (allow-list, not '*')
# ─────────────────────────────────────────────────────────────
def configure_cors(
    app,
    *,
    allow_credentials: bool = True,
    allow_methods: Optional[Iterable[str]] = None,
    allow_headers: Optional[Iterable[str]] = None,
) -> None:
    """Install strict CORS based on settings."""
    origins: List[str] = settings.frontend_origins_list
    if not origins and settings.is_development:
        origins = list(_DEV_ORIGINS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=list(allow_methods or ["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"]),
        allow_headers=list(allow_headers or ["Authorization", "Content-Type", "X-Request-ID"]),
        expose_headers=["Location", "Retry-After", "X-Request-ID"],
        max_age=3600,
    )


def install_security(app) -> None:
    app.add_middleware(SecurityHeadersMiddleware)


__all__ = [
    "SecurityHeadersMiddleware",
    "configure_cors",
    "install_security",
    "set_sensitive_cache",
]
