# moviereview/core/dependencies.py
from __future__ import annotations

"""
Request dependencies — principal binding & role policy
======================================================

- `get_current_principal`: verify the bearer token and bind its claims to the
  request (no DB access).
- `get_current_user`: the principal's account row; 401 if it no longer exists.
- `require_admin`: 403 unless the bound role is ADMIN.

Bearer parsing and token decoding live in `moviereview.core.jwt`; this module
only *uses* them.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.exceptions import AuthenticationException, AuthorizationException
from moviereview.core.jwt import decode_access_token, get_bearer_token
from moviereview.db.models.user import User
from moviereview.db.session import get_async_db
from moviereview.repositories import UserRepository
from moviereview.schemas.auth import TokenPayload
from moviereview.schemas.enums import Role

logger = logging.getLogger(__name__)

__all__ = [
    "get_current_principal",
    "get_current_user",
    "require_role",
    "require_admin",
]


# ──────────────────────────────────────────────────────────────
# 🔐 Principal (token only)
# ──────────────────────────────────────────────────────────────
async def get_current_principal(request: Request) -> TokenPayload:
    """Verify the bearer token and attach its payload to `request.state`."""
    # [Step 1] Extract & decode
    principal = decode_access_token(get_bearer_token(request))

    # [Step 2] Bind to request (rate-limit keys, logs)
    request.state.token_payload = principal
    if principal.uid is not None:
        request.state.user_id = principal.uid
    return principal


# ──────────────────────────────────────────────────────────────
# 👤 Current user (token + account row)
# ──────────────────────────────────────────────────────────────
async def get_current_user(
    request: Request,
    principal: TokenPayload = Depends(get_current_principal),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """Load the account named by the token's subject."""
    user = await UserRepository(db).get_by_username(principal.sub)
    if user is None:
        logger.warning("Token subject %r has no account", principal.sub)
        raise AuthenticationException("User no longer exists")
    request.state.user_id = user.id
    return user


# ──────────────────────────────────────────────────────────────
# 🛡️ Role policy
# ──────────────────────────────────────────────────────────────
def require_role(role: Role):
    """Dependency factory: the bound role must equal `role`."""

    async def _guard(principal: TokenPayload = Depends(get_current_principal)) -> TokenPayload:
        if principal.role != role:
            logger.info("Role %s denied; %s required", principal.role.value, role.value)
            raise AuthorizationException("Insufficient permissions")
        return principal

    return _guard


require_admin = require_role(Role.ADMIN)
