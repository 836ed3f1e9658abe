# moviereview/api/v1/routers/auth.py
from __future__ import annotations

"""
Authentication API
==================

Endpoints
---------
POST /auth/register
    Create a USER account and return its identity plus an access token.

POST /auth/login
    Username + password sign-in; returns identity plus an access token.

Security
--------
- Route rate limits keyed per client IP.
- Token-issuing responses are marked **no-store**.
- Neutral 401 on bad credentials (no user enumeration).
"""

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.limiter import rate_limit
from moviereview.db.session import get_async_db
from moviereview.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from moviereview.security_headers import set_sensitive_cache
from moviereview.services import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ──────────────────────────────────────────────────────────────
# 📝 POST /auth/register
# ──────────────────────────────────────────────────────────────
@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
@rate_limit("5/minute")
async def register(
    request: Request,
    response: Response,
    payload: RegisterRequest = Body(...),
    db: AsyncSession = Depends(get_async_db),
) -> AuthResponse:
    # [Step 0] Cache hardening
    set_sensitive_cache(response)
    # [Step 1] Delegate (409 on duplicate username/email)
    return await auth_service.register(db, payload)


# ──────────────────────────────────────────────────────────────
# 🔐 POST /auth/login
# ──────────────────────────────────────────────────────────────
@router.post("/login", response_model=AuthResponse, summary="Username + password login")
@rate_limit("10/minute")
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest = Body(...),
    db: AsyncSession = Depends(get_async_db),
) -> AuthResponse:
    # [Step 0] Cache hardening
    set_sensitive_cache(response)
    # [Step 1] Delegate (neutral 401 on failure)
    return await auth_service.login(db, payload)


__all__ = ["router", "register", "login"]
