from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from moviereview.schemas.enums import Role


class UserOut(BaseModel):
    """Public account view; the password hash never leaves the service layer."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role
    created_at: datetime


__all__ = ["UserOut"]
