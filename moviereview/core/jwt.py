# moviereview/core/jwt.py
from __future__ import annotations

"""
Movie Review API — JWT verification
===================================
- `decode_token` verifies signature, `exp`/`nbf`/`iat`, optional issuer and
  audience, then the claims this API relies on (`sub`, `role`, `jti`,
  `token_type`).
- `get_bearer_token` extracts a Bearer token from the `Authorization` header.

Every rejection is an `InvalidTokenException` (401 + `WWW-Authenticate: Bearer`).
Token *creation* lives in `moviereview.core.security`.
"""

from typing import Any, Dict, Optional, Sequence
import logging

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from moviereview.core.config import settings
from moviereview.core.exceptions import InvalidTokenException
from moviereview.core.security import ACCESS_TOKEN_TYPE
from moviereview.schemas.auth import TokenPayload
from moviereview.schemas.enums import Role

logger = logging.getLogger("moviereview.auth")


# ─────────────────────────────────────────────────────────────
# 🔓 Decode & validate
# ─────────────────────────────────────────────────────────────
def decode_token(
    token: str,
    *,
    expected_types: Optional[Sequence[str]] = (ACCESS_TOKEN_TYPE,),
) -> Dict[str, Any]:
    """Decode and validate a JWT, returning its claims.

    Security checks
    ---------------
    1) Verify signature and standard claims (exp/nbf/iat)
    2) Enforce issuer/audience when configured
    3) Require `sub`, `jti` and a known `role`
    4) Require `token_type` membership when `expected_types` is given
    """
    issuer = settings.JWT_ISSUER
    audience = settings.JWT_AUDIENCE
    options: Dict[str, Any] = {"verify_aud": bool(audience)}

    # 1) + 2)
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options=options,
            audience=audience,
            issuer=issuer,
        )
    except ExpiredSignatureError:
        logger.info("Token expired.")
        raise InvalidTokenException("Token has expired.")
    except JWTError as e:
        logger.warning("JWT decoding failed: %s", e)
        raise InvalidTokenException("Invalid token.")

    # 3) Required claims
    if not payload.get("sub"):
        logger.warning("Missing sub in token payload.")
        raise InvalidTokenException("Token missing subject.")
    if not payload.get("jti"):
        logger.warning("Missing JTI in token.")
        raise InvalidTokenException("Token missing JTI.")
    if Role.parse(payload.get("role")) is None:
        logger.warning("Unknown role in token: %r", payload.get("role"))
        raise InvalidTokenException("Token carries an unknown role.")

    # 4) Token type enforcement
    if expected_types is not None and payload.get("token_type") not in set(expected_types):
        logger.warning(
            "Token type mismatch: got %r, expected one of %s",
            payload.get("token_type"),
            list(expected_types),
        )
        raise InvalidTokenException("Invalid token type.")

    return payload


def decode_access_token(token: str) -> TokenPayload:
    """Decode an **access** token into a typed `TokenPayload`."""
    claims = decode_token(token, expected_types=(ACCESS_TOKEN_TYPE,))
    try:
        return TokenPayload.model_validate(claims)
    except ValidationError:
        logger.warning("Access token claims failed validation.")
        raise InvalidTokenException("Invalid token payload.")


# ─────────────────────────────────────────────────────────────
# 📥 Extract Bearer Token from Authorization Header
# ─────────────────────────────────────────────────────────────
def get_bearer_token(request: Request) -> str:
    """Extract a Bearer token from the `Authorization` header (case-insensitive)."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise InvalidTokenException("Missing Authorization header.")

    scheme, _, token = auth_header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise InvalidTokenException("Invalid Authorization scheme.")
    return token


__all__ = ["decode_token", "decode_access_token", "get_bearer_token"]
