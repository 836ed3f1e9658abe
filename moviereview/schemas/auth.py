from __future__ import annotations

"""Auth request/response schemas and the decoded token payload."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from moviereview.db.models.user import USERNAME_MAX, USERNAME_MIN
from moviereview.schemas.enums import Role

PASSWORD_MIN = 6
PASSWORD_MAX = 128


class RegisterRequest(BaseModel):
    """Self-service registration. New accounts always get role USER."""

    username: str = Field(..., min_length=USERNAME_MIN, max_length=USERNAME_MAX)
    password: str = Field(..., min_length=PASSWORD_MIN, max_length=PASSWORD_MAX)
    email: EmailStr

    @field_validator("username")
    @classmethod
    def _strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < USERNAME_MIN:
            raise ValueError(f"username must be at least {USERNAME_MIN} characters")
        return v


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=USERNAME_MAX)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX)


class AuthResponse(BaseModel):
    """Identity of the authenticated account plus a signed access token."""

    id: int
    username: str
    email: str
    role: Role
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class TokenPayload(BaseModel):
    """Claims carried by an access token once signature and expiry are verified."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    sub: str
    role: Role
    uid: Optional[int] = None
    exp: int
    iat: Optional[int] = None
    jti: str
    token_type: str = "access"

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, v):
        return Role.parse(v) or v

    @property
    def username(self) -> str:
        return self.sub

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


__all__ = ["RegisterRequest", "LoginRequest", "AuthResponse", "TokenPayload"]
