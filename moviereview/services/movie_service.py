"""
Movie Catalog — CRUD, search and rating lookups
===============================================

- Partial updates: only fields present in `changes` (and not None) are applied.
- Search is a case-insensitive substring match on title OR genre.
- **Deletion is one transaction**: the movie's reviews are removed first, then
  the movie row. Any failure rolls back both steps.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.exceptions import NotFoundException, ValidationException
from moviereview.db.models.movie import (
    DESCRIPTION_MAX,
    DIRECTOR_MAX,
    GENRE_MAX,
    POSTER_URL_MAX,
    TITLE_MAX,
    Movie,
)
from moviereview.repositories import MovieRepository, ReviewRepository

logger = logging.getLogger(__name__)

MOVIE_FIELDS = (
    "title",
    "description",
    "release_date",
    "director",
    "genre",
    "poster_url",
    "duration",
)

_MAX_LENGTHS = {
    "title": TITLE_MAX,
    "description": DESCRIPTION_MAX,
    "director": DIRECTOR_MAX,
    "genre": GENRE_MAX,
    "poster_url": POSTER_URL_MAX,
}


def _clean(values: Mapping[str, Any], *, partial: bool) -> Dict[str, Any]:
    """Keep known, non-None fields and check them against column limits."""
    data = {k: v for k, v in values.items() if k in MOVIE_FIELDS and v is not None}

    if "title" in data:
        data["title"] = str(data["title"]).strip()
    if not partial or "title" in data:
        if not data.get("title"):
            raise ValidationException("Title is required", details={"field": "title"})

    for field, limit in _MAX_LENGTHS.items():
        if field in data and len(str(data[field])) > limit:
            raise ValidationException(
                f"{field} must be at most {limit} characters", details={"field": field}
            )
    duration = data.get("duration")
    if duration is not None and (isinstance(duration, bool) or int(duration) <= 0):
        raise ValidationException("duration must be a positive number of minutes", details={"field": "duration"})
    return data


# ─────────────────────────────────────────────────────────────
# 📖 Reads
# ─────────────────────────────────────────────────────────────
async def list_movies(db: AsyncSession) -> List[Movie]:
    return await MovieRepository(db).list_all()


async def get_movie(db: AsyncSession, movie_id: int) -> Optional[Movie]:
    return await MovieRepository(db).get(movie_id)


async def search_movies(db: AsyncSession, term: Optional[str]) -> List[Movie]:
    term = (term or "").strip()
    if not term:
        return await list_movies(db)
    return await MovieRepository(db).search(term)


async def get_average_rating(db: AsyncSession, movie_id: int) -> float:
    return await ReviewRepository(db).average_rating(movie_id)


async def get_rating_stats(db: AsyncSession, movie_id: int) -> Tuple[float, int]:
    if await MovieRepository(db).get(movie_id) is None:
        raise NotFoundException(f"Movie not found with id: {movie_id}")
    return await ReviewRepository(db).rating_stats(movie_id)


async def average_ratings(db: AsyncSession, movie_ids: Iterable[int]) -> Dict[int, float]:
    return await ReviewRepository(db).average_ratings(movie_ids)


# ─────────────────────────────────────────────────────────────
# ✍️ Writes
# ─────────────────────────────────────────────────────────────
async def create_movie(db: AsyncSession, values: Mapping[str, Any]) -> Movie:
    movie = MovieRepository(db).add(Movie(**_clean(values, partial=False)))
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Movie %s created: %r", movie.id, movie.title)
    return movie


async def update_movie(db: AsyncSession, movie_id: int, changes: Mapping[str, Any]) -> Movie:
    movie = await MovieRepository(db).get(movie_id)
    if movie is None:
        raise NotFoundException(f"Movie not found with id: {movie_id}")

    data = _clean(changes, partial=True)
    for field, value in data.items():
        setattr(movie, field, value)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Movie %s updated fields=%s", movie_id, sorted(data))
    return movie


async def delete_movie(db: AsyncSession, movie_id: int) -> None:
    """Delete a movie and all of its reviews atomically."""
    movies = MovieRepository(db)
    if await movies.get(movie_id) is None:
        raise NotFoundException(f"Movie not found with id: {movie_id}")

    try:
        removed = await ReviewRepository(db).delete_for_movie(movie_id)
        await movies.delete(movie_id)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Deleting movie %s failed; rolled back", movie_id)
        raise
    logger.info("Movie %s deleted with %d review(s)", movie_id, removed)


__all__ = [
    "MOVIE_FIELDS",
    "list_movies",
    "get_movie",
    "search_movies",
    "get_average_rating",
    "get_rating_stats",
    "average_ratings",
    "create_movie",
    "update_movie",
    "delete_movie",
]
