# moviereview/core/security.py
from __future__ import annotations

"""
Movie Review API — Password hashing & token issuance
====================================================
- bcrypt via Passlib (`CryptContext`), cost from `settings.BCRYPT_ROUNDS`
- Access tokens bind (username, role) plus `uid`, with iss/aud/iat/nbf/jti
- Decoding lives in `moviereview.core.jwt`
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4
import logging

from jose import jwt
from passlib.context import CryptContext

from moviereview.core.config import settings
from moviereview.schemas.enums import Role

# ───────────────────────────────────────────────
# 🔐 Security Constants and Setup
# ───────────────────────────────────────────────
ALGORITHM: str = settings.JWT_ALGORITHM
ACCESS_TOKEN_TYPE = "access"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)
logger = logging.getLogger("moviereview.security")

_dummy_hash: Optional[str] = None


# ───────────────────────────────────────────────
# 🔐 Password Hashing Utilities
# ───────────────────────────────────────────────
def get_password_hash(password: str) -> str:
    """Return a salted hash using Passlib's bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time verify of a plaintext password against a stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def burn_password_check(plain_password: str) -> None:
    """Spend one bcrypt verification against a throwaway hash.

    Called when the account does not exist so a failed login costs the same
    as a wrong password.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = pwd_context.hash(uuid4().hex)
    pwd_context.verify(plain_password, _dummy_hash)


# ───────────────────────────────────────────────
# 🪪 JWT — Access Token Generation
# ───────────────────────────────────────────────
def access_token_ttl() -> timedelta:
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_access_token(
    subject: str,
    role: Role,
    *,
    user_id: Optional[int] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed **access token** for `subject` (the username)."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else access_token_ttl())

    payload: Dict[str, Any] = {
        "sub": str(subject),
        "role": Role(role).value,
        "exp": expire,
        "iat": now,
        "nbf": now,
        "jti": str(uuid4()),
        "token_type": ACCESS_TOKEN_TYPE,
    }
    if user_id is not None:
        payload["uid"] = int(user_id)
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER
    if settings.JWT_AUDIENCE:
        payload["aud"] = settings.JWT_AUDIENCE

    return jwt.encode(payload, settings.JWT_SECRET_KEY.get_secret_value(), algorithm=ALGORITHM)


__all__ = [
    "pwd_context",
    "get_password_hash",
    "verify_password",
    "burn_password_check",
    "access_token_ttl",
    "create_access_token",
]
