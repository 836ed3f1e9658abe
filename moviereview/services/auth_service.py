# moviereview/services/auth_service.py
from __future__ import annotations

"""
Auth Gateway — login & registration
===================================

- **Username + password login** with neutral errors: an unknown username and
  a wrong password produce the same 401, and an unknown username still pays
  for one bcrypt verification.
- **Registration** delegates to the User Directory and always yields role USER.
- Both return the account identity plus a signed access token.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.exceptions import AuthenticationException
from moviereview.core.security import access_token_ttl, burn_password_check, create_access_token
from moviereview.db.models.user import User
from moviereview.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from moviereview.schemas.enums import Role
from moviereview.services import user_service

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


def issue_token(user: User) -> AuthResponse:
    """Mint an access token for `user` and wrap it with the account identity."""
    token = create_access_token(user.username, user.role, user_id=user.id)
    return AuthResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        token=token,
        expires_in=int(access_token_ttl().total_seconds()),
    )


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    """Return the user whose credentials match, else raise a neutral 401."""
    user = await user_service.find_by_username(db, (username or "").strip())
    if user is None:
        burn_password_check(password)
        logger.info("Login failed: unknown username")
        raise AuthenticationException(INVALID_CREDENTIALS)
    if not user_service.validate_password(user, password):
        logger.info("Login failed: bad password for user id=%s", user.id)
        raise AuthenticationException(INVALID_CREDENTIALS)
    return user


async def login(db: AsyncSession, payload: LoginRequest) -> AuthResponse:
    # [Step 1] Verify credentials
    user = await authenticate(db, payload.username, payload.password)
    # [Step 2] Issue token
    logger.info("User id=%s logged in", user.id)
    return issue_token(user)


async def register(db: AsyncSession, payload: RegisterRequest) -> AuthResponse:
    # [Step 1] Create account (409 on duplicate username/email)
    user = await user_service.create_user(
        db,
        username=payload.username,
        password=payload.password,
        email=str(payload.email),
        role=Role.USER,
    )
    # [Step 2] Issue token
    return issue_token(user)


__all__ = ["INVALID_CREDENTIALS", "issue_token", "authenticate", "login", "register"]
