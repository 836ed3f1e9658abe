"""
Movie Review API — SQLAlchemy Base registry
===========================================

Import all ORM models so their tables are registered on `Base.metadata`
(`create_all` at startup and in tests relies on this).

Tip: Keep this file import-only; no runtime logic.
"""

from moviereview.db.base_class import Base

from moviereview.db.models.movie import Movie
from moviereview.db.models.user import User
from moviereview.db.models.review import Review

__all__ = ["Base", "Movie", "User", "Review"]
