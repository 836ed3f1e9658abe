# tests/utils/factory.py
"""Small builders shared by fixtures and tests."""

from datetime import date
from typing import Any, Dict, Optional
from uuid import uuid4

from moviereview.core.security import create_access_token
from moviereview.db.models.user import User


def unique_username(prefix: str = "user") -> str:
    return f"{prefix}_{uuid4().hex[:8]}"


def unique_email(username: Optional[str] = None) -> str:
    return f"{username or uuid4().hex[:8]}@example.com"


def movie_payload(**overrides: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "title": f"Movie {uuid4().hex[:6]}",
        "description": "A film about testing.",
        "release_date": date(2010, 7, 16),
        "director": "Jane Doe",
        "genre": "Drama",
        "duration": 120,
    }
    data.update(overrides)
    return data


def bearer_for(user: User) -> Dict[str, str]:
    token = create_access_token(user.username, user.role, user_id=user.id)
    return {"Authorization": f"Bearer {token}"}
