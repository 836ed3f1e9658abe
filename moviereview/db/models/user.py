from __future__ import annotations

"""
👤 Movie Review API — User (accounts & auth)
===========================================

Login credentials and role. Passwords are stored only as bcrypt hashes.
Emails are normalized to lower case before they reach this table.
"""

from sqlalchemy import CheckConstraint, Column, Enum, String, UniqueConstraint

from moviereview.db.base_class import Base, CreatedAtMixin, PKMixin
from moviereview.schemas.enums import Role

USERNAME_MIN = 3
USERNAME_MAX = 50
EMAIL_MAX = 255


# ──────────────────────────────────────────────────────────────────────────────
# User Model
# ──────────────────────────────────────────────────────────────────────────────

class User(PKMixin, CreatedAtMixin, Base):
    """Account record; owns the reviews it authored."""

    __tablename__ = "users"

    # ── Identity & Authentication ─────────────────────────────────────────────
    username = Column(String(USERNAME_MAX), nullable=False)
    email = Column(String(EMAIL_MAX), nullable=False)
    hashed_password = Column(String(255), nullable=False, doc="bcrypt hash of the password")

    role = Column(
        Enum(Role, name="user_role"),
        nullable=False,
        default=Role.USER,
    )

    __mapper_args__ = {"eager_defaults": True}

    # ── Indexes / Constraints ────────────────────────────────────────────────
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint(
            f"length(username) BETWEEN {USERNAME_MIN} AND {USERNAME_MAX}",
            name="username_len",
        ),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
