from __future__ import annotations

"""
Central enum definitions used across the Movie Review API.

Design notes
------------
• Enums subclass `str, PyEnum` for JSON-friendly serialization.
• VALUE STRINGS are **stable** once deployed (the DB enum and issued tokens depend on them).
"""

from enum import Enum as PyEnum
from typing import Optional


class Role(str, PyEnum):
    """Account role; authorization policy switches on it."""
    USER = "USER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Case-insensitive lookup; returns None for unknown or blank values."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        return cls.__members__.get(key)


__all__ = ["Role"]
