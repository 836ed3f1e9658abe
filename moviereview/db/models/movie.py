from __future__ import annotations

"""
🎬 Movie Review API — Movie (catalog entry)
==========================================

A title users can review. `average_rating` is not stored: it is computed on
read from the `reviews` table so it can never drift from live review data.

Relationships
-------------
• Reviews reference a movie via `reviews.movie_id`. Deleting a movie goes
  through `movie_service.delete_movie`, which removes reviews first in the
  same transaction; the FK's `ON DELETE CASCADE` is only a storage backstop.
"""

from sqlalchemy import CheckConstraint, Column, Date, Index, Integer, String, Text

from moviereview.db.base_class import Base, CreatedAtMixin, PKMixin

TITLE_MAX = 255
DESCRIPTION_MAX = 5000
DIRECTOR_MAX = 255
GENRE_MAX = 100
POSTER_URL_MAX = 1024


# ───────────────────────────────────────────────────────────────
# Model
# ───────────────────────────────────────────────────────────────
class Movie(PKMixin, CreatedAtMixin, Base):
    """Catalog entry managed by admins."""

    __tablename__ = "movies"

    # ── Core fields ─────────────────────────────────────────────────────────
    title = Column(String(TITLE_MAX), nullable=False)
    description = Column(Text, nullable=True)
    release_date = Column(Date, nullable=True)
    director = Column(String(DIRECTOR_MAX), nullable=True)
    genre = Column(String(GENRE_MAX), nullable=True)
    poster_url = Column(String(POSTER_URL_MAX), nullable=True)
    duration = Column(Integer, nullable=True, doc="Runtime in minutes.")

    __mapper_args__ = {"eager_defaults": True}

    # ── Constraints & indexes ──────────────────────────────────────────────
    __table_args__ = (
        CheckConstraint("length(title) > 0", name="title_not_blank"),
        CheckConstraint("duration IS NULL OR duration > 0", name="duration_positive"),
        CheckConstraint(
            f"description IS NULL OR length(description) <= {DESCRIPTION_MAX}",
            name="description_len",
        ),
        Index("ix_movies_title", "title"),
        Index("ix_movies_genre", "genre"),
    )
