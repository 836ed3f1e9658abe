"""
Review Engine — submit, edit, delete and the rating aggregate
============================================================

Key behaviors
-------------
- **One review per (movie, author)**. The pre-insert lookup only produces a
  clean 409; the `uq_reviews_movie_user` constraint is what actually enforces
  it, and an `IntegrityError` on insert is turned into the same 409.
- **Ownership**: only the author edits; the author or an admin deletes.
- **Input checks run before storage**: rating in 1..5, comment ≤ 2000 chars.
- **Average rating is computed on read** (`AVG` in SQL), so every read reflects
  the live review rows; 0.0 when a movie has none.
- **Feeds** are newest-first with a deterministic tie-break on id.

Transactions
------------
Every write commits on success and rolls back on any exception before
re-raising, so a failed request leaves stored state untouched.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.exceptions import (
    AuthorizationException,
    ConflictException,
    NotFoundException,
    ValidationException,
)
from moviereview.db.models.review import COMMENT_MAX, RATING_MAX, RATING_MIN, Review
from moviereview.repositories import MovieRepository, ReviewRepository, UserRepository

logger = logging.getLogger(__name__)

RECENT_DEFAULT_LIMIT = 10
RECENT_MAX_LIMIT = 50


# ─────────────────────────────────────────────────────────────
# 🔧 Input checks
# ─────────────────────────────────────────────────────────────
def _validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationException("Rating must be an integer", details={"field": "rating"})
    if not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationException(
            f"Rating must be between {RATING_MIN} and {RATING_MAX}",
            details={"field": "rating", "value": rating},
        )
    return rating


def _validate_comment(comment: Optional[str]) -> Optional[str]:
    if comment is not None and len(comment) > COMMENT_MAX:
        raise ValidationException(
            f"Comment must be at most {COMMENT_MAX} characters",
            details={"field": "comment"},
        )
    return comment


def clamp_recent_limit(limit: Optional[int]) -> int:
    """Default to 10 when unspecified; never exceed 50."""
    if limit is None:
        return RECENT_DEFAULT_LIMIT
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationException("limit must be a positive integer", details={"field": "limit"})
    return min(limit, RECENT_MAX_LIMIT)


# ─────────────────────────────────────────────────────────────
# ✍️ Writes
# ─────────────────────────────────────────────────────────────
async def submit_review(
    db: AsyncSession,
    movie_id: int,
    author_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    """Create the author's review of a movie.

    Raises
    ------
    ValidationException  rating/comment out of bounds (checked first)
    NotFoundException    movie or author missing
    ConflictException    the author already reviewed this movie
    """
    _validate_rating(rating)
    _validate_comment(comment)

    reviews = ReviewRepository(db)

    movie = await MovieRepository(db).get(movie_id)
    if movie is None:
        raise NotFoundException(f"Movie not found with id: {movie_id}")
    author = await UserRepository(db).get(author_id)
    if author is None:
        raise NotFoundException(f"User not found with id: {author_id}")

    # Fast path only; the unique constraint decides
    if await reviews.find_by_movie_and_user(movie_id, author_id) is not None:
        raise ConflictException(
            "User has already reviewed this movie",
            details={"movie_id": movie_id, "user_id": author_id},
        )

    review = reviews.add(Review(movie=movie, user=author, rating=rating, comment=comment))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        # The movie or author may have been deleted after the lookups above
        if await MovieRepository(db).get(movie_id) is None:
            raise NotFoundException(f"Movie not found with id: {movie_id}")
        if await UserRepository(db).get(author_id) is None:
            raise NotFoundException(f"User not found with id: {author_id}")
        logger.info("Duplicate review rejected by constraint movie=%s user=%s", movie_id, author_id)
        raise ConflictException(
            "User has already reviewed this movie",
            details={"movie_id": movie_id, "user_id": author_id},
        )

    logger.info("Review %s submitted movie=%s user=%s rating=%s", review.id, movie_id, author_id, rating)
    return review


async def update_review(
    db: AsyncSession,
    review_id: int,
    caller_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    """Overwrite rating and comment of the caller's own review."""
    _validate_rating(rating)
    _validate_comment(comment)

    review = await ReviewRepository(db).get(review_id)
    if review is None:
        raise NotFoundException(f"Review not found with id: {review_id}")
    if review.user_id != caller_id:
        logger.warning("User %s tried to edit review %s owned by %s", caller_id, review_id, review.user_id)
        raise AuthorizationException("You can only update your own reviews")

    review.rating = rating
    review.comment = comment
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Review %s updated by user %s", review_id, caller_id)
    return review


async def delete_review(
    db: AsyncSession,
    review_id: int,
    caller_id: int,
    caller_is_admin: bool = False,
) -> None:
    """Remove a review; allowed for its author or any admin."""
    reviews = ReviewRepository(db)
    review = await reviews.get(review_id)
    if review is None:
        raise NotFoundException(f"Review not found with id: {review_id}")
    if review.user_id != caller_id and not caller_is_admin:
        logger.warning("User %s tried to delete review %s owned by %s", caller_id, review_id, review.user_id)
        raise AuthorizationException("You can only delete your own reviews")

    try:
        await reviews.delete(review)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Review %s deleted by user %s%s", review_id, caller_id, " (admin)" if caller_is_admin else ""
    )


# ─────────────────────────────────────────────────────────────
# 📖 Reads
# ─────────────────────────────────────────────────────────────
async def get_review(db: AsyncSession, review_id: int) -> Optional[Review]:
    return await ReviewRepository(db).get(review_id)


async def get_reviews_for_movie(db: AsyncSession, movie_id: int) -> List[Review]:
    return await ReviewRepository(db).list_for_movie(movie_id)


async def get_reviews_by_user(db: AsyncSession, user_id: int) -> List[Review]:
    return await ReviewRepository(db).list_for_user(user_id)


async def get_recent_reviews(db: AsyncSession, limit: Optional[int] = None) -> List[Review]:
    return await ReviewRepository(db).list_recent(clamp_recent_limit(limit))


async def get_average_rating_for_movie(db: AsyncSession, movie_id: int) -> float:
    """Mean rating rounded to two decimals; 0.0 for no reviews or unknown movie."""
    return await ReviewRepository(db).average_rating(movie_id)


__all__ = [
    "RECENT_DEFAULT_LIMIT",
    "RECENT_MAX_LIMIT",
    "clamp_recent_limit",
    "submit_review",
    "update_review",
    "delete_review",
    "get_review",
    "get_reviews_for_movie",
    "get_reviews_by_user",
    "get_recent_reviews",
    "get_average_rating_for_movie",
]
