"""
User Directory — registration, lookup, password verification
============================================================

Key behaviors
-------------
- **Unique username and email**: fast duplicate check for a clean 409, with the
  storage unique constraints as the source of truth (`IntegrityError` → 409).
- **Normalized email** (trimmed, lower-case) and server-side **bcrypt** hashing.
- **Role defaults to USER** when absent or blank; unknown roles are rejected.
- Lookups return `None` on absence so callers can tell absence from faults.
- **Explicit cascade** on delete: the user's reviews go first, in one transaction.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.exceptions import ConflictException, NotFoundException, ValidationException
from moviereview.core.security import get_password_hash, verify_password
from moviereview.db.models.user import EMAIL_MAX, USERNAME_MAX, USERNAME_MIN, User
from moviereview.repositories import ReviewRepository, UserRepository
from moviereview.schemas.enums import Role

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────
# 🔧 Helpers
# ─────────────────────────────────────────────────────────────
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]{2,}$")


def _norm_email(email: str) -> str:
    return (email or "").strip().lower()


def _resolve_role(role: Union[Role, str, None]) -> Role:
    if role is None or (isinstance(role, str) and not role.strip()):
        return Role.USER
    parsed = Role.parse(role)
    if parsed is None:
        raise ValidationException(f"Unknown role: {role}", details={"field": "role"})
    return parsed


# ─────────────────────────────────────────────────────────────
# 📝 Create
# ─────────────────────────────────────────────────────────────
async def create_user(
    db: AsyncSession,
    username: str,
    password: str,
    email: str,
    role: Union[Role, str, None] = None,
) -> User:
    """Register a new account.

    Steps
    -----
    1) Normalize and validate username/email/password.
    2) Fast duplicate checks (username, then email) → 409.
    3) Hash the password and insert; a unique-constraint race also → 409.
    """
    # 1) Normalize & validate
    username = (username or "").strip()
    email_norm = _norm_email(email)
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise ValidationException(
            f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters",
            details={"field": "username"},
        )
    if len(email_norm) > EMAIL_MAX or not _EMAIL_RE.match(email_norm):
        raise ValidationException("Invalid email format", details={"field": "email"})
    if not password:
        raise ValidationException("Password is required", details={"field": "password"})
    resolved_role = _resolve_role(role)

    users = UserRepository(db)

    # 2) Fast duplicate checks
    if await users.username_exists(username):
        raise ConflictException("Username already exists", details={"field": "username"})
    if await users.email_exists(email_norm):
        raise ConflictException("Email already registered", details={"field": "email"})

    # 3) Insert
    user = users.add(
        User(
            username=username,
            email=email_norm,
            hashed_password=get_password_hash(password),
            role=resolved_role,
        )
    )
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("User insert lost a uniqueness race for %r", username)
        raise ConflictException("Username or email already exists")

    logger.info("Registered user id=%s username=%r role=%s", user.id, user.username, user.role.value)
    return user


async def ensure_admin(db: AsyncSession, username: str, password: str, email: str) -> User:
    """Create an ADMIN account unless `username` already exists (idempotent)."""
    existing = await UserRepository(db).get_by_username(username)
    if existing is not None:
        if existing.role != Role.ADMIN:
            logger.warning("Bootstrap admin %r exists without the ADMIN role", username)
        return existing
    return await create_user(db, username, password, email, role=Role.ADMIN)


# ─────────────────────────────────────────────────────────────
# 🔎 Lookups
# ─────────────────────────────────────────────────────────────
async def find_by_username(db: AsyncSession, username: str) -> Optional[User]:
    return await UserRepository(db).get_by_username(username)


async def find_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    return await UserRepository(db).get(user_id)


def validate_password(user: User, raw_password: str) -> bool:
    """Compare `raw_password` with the stored bcrypt hash (constant time)."""
    return verify_password(raw_password, user.hashed_password)


# ─────────────────────────────────────────────────────────────
# 🗑️ Delete (reviews first, then the account)
# ─────────────────────────────────────────────────────────────
async def delete_user(db: AsyncSession, user_id: int) -> None:
    if await UserRepository(db).get(user_id) is None:
        raise NotFoundException(f"User not found with id: {user_id}")
    try:
        removed = await ReviewRepository(db).delete_for_user(user_id)
        await UserRepository(db).delete(user_id)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Deleting user id=%s failed; rolled back", user_id)
        raise
    logger.info("Deleted user id=%s with %d review(s)", user_id, removed)


__all__ = [
    "create_user",
    "ensure_admin",
    "find_by_username",
    "find_by_id",
    "validate_password",
    "delete_user",
]
