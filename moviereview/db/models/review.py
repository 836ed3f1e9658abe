from __future__ import annotations

"""
⭐ Movie Review API — Review (user ratings & comments)
=====================================================

A user's 1–5 rating of a movie with an optional comment.

Highlights
----------
• **Single review per (movie, user)** via a storage-level unique constraint.
  The service-level duplicate check is only a fast path for a clean 409.
• `movie_id`, `user_id` and `review_date` are fixed at creation.
• Feed indexes on (movie_id, review_date), (user_id, review_date), review_date.

Relationships
-------------
• `Review.movie` → `Movie`, `Review.user` → `User` (many-to-one, selectin),
  used to denormalize the movie title and author username into responses.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from moviereview.db.base_class import Base, BigIntPK, PKMixin, utcnow

RATING_MIN = 1
RATING_MAX = 5
COMMENT_MAX = 2000


# ───────────────────────────────────────────────────────────────
# Model
# ───────────────────────────────────────────────────────────────
class Review(PKMixin, Base):
    """A user's rating and optional commentary for a `Movie`."""

    __tablename__ = "reviews"

    # ── Identity & ownership ────────────────────────────────────────────────
    movie_id = Column(BigIntPK, ForeignKey("movies.id", ondelete="CASCADE"),
                      nullable=False, index=True, doc="Reviewed movie.")

    user_id = Column(BigIntPK, ForeignKey("users.id", ondelete="CASCADE"),
                     nullable=False, index=True, doc="Author of the review.")

    # ── Core review fields ──────────────────────────────────────────────────
    rating = Column(SmallInteger, nullable=False, doc=f"Integer {RATING_MIN}..{RATING_MAX}.")
    comment = Column(Text, nullable=True)

    # ── Timestamps ─────────────────────────────────────────────────────────
    review_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __mapper_args__ = {"eager_defaults": True}

    # ── Constraints & indexes ──────────────────────────────────────────────
    __table_args__ = (
        UniqueConstraint("movie_id", "user_id", name="uq_reviews_movie_user"),
        CheckConstraint(f"rating BETWEEN {RATING_MIN} AND {RATING_MAX}", name="rating_range"),
        CheckConstraint(f"comment IS NULL OR length(comment) <= {COMMENT_MAX}", name="comment_len"),
        Index("ix_reviews_movie_date", "movie_id", "review_date"),
        Index("ix_reviews_user_date", "user_id", "review_date"),
        Index("ix_reviews_review_date", "review_date"),
    )

    # ── Relationships ──────────────────────────────────────────────────────
    movie = relationship("Movie", lazy="selectin")
    user = relationship("User", lazy="selectin")

    # ── Denormalized display fields ────────────────────────────────────────
    @property
    def movie_title(self) -> str | None:
        return self.movie.title if self.movie is not None else None

    @property
    def username(self) -> str | None:
        return self.user.username if self.user is not None else None
