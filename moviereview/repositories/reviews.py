from __future__ import annotations

"""
Review queries and the rating aggregate.

Feeds are ordered newest-first by `review_date`, with `id` descending as the
tie-breaker so equal timestamps still come back in a fixed order.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.db.models.review import Review

_TWO_PLACES = Decimal("0.01")

NEWEST_FIRST = (Review.review_date.desc(), Review.id.desc())


def round_rating(value) -> float:
    """Round an average half-up to two decimals; `None` (no reviews) is 0.0."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class ReviewRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ── Reads ──────────────────────────────────────────────────────────────
    async def get(self, review_id: int) -> Optional[Review]:
        return await self.db.get(Review, review_id)

    async def find_by_movie_and_user(self, movie_id: int, user_id: int) -> Optional[Review]:
        result = await self.db.execute(
            select(Review).where(Review.movie_id == movie_id, Review.user_id == user_id)
        )
        return result.scalars().first()

    async def list_for_movie(self, movie_id: int) -> List[Review]:
        result = await self.db.execute(
            select(Review).where(Review.movie_id == movie_id).order_by(*NEWEST_FIRST)
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: int) -> List[Review]:
        result = await self.db.execute(
            select(Review).where(Review.user_id == user_id).order_by(*NEWEST_FIRST)
        )
        return list(result.scalars().all())

    async def list_recent(self, limit: int) -> List[Review]:
        result = await self.db.execute(select(Review).order_by(*NEWEST_FIRST).limit(limit))
        return list(result.scalars().all())

    # ── Aggregates ─────────────────────────────────────────────────────────
    async def rating_stats(self, movie_id: int) -> Tuple[float, int]:
        """(rounded average, review count) for one movie."""
        result = await self.db.execute(
            select(func.avg(Review.rating), func.count(Review.id)).where(Review.movie_id == movie_id)
        )
        avg, count = result.one()
        return round_rating(avg), int(count or 0)

    async def average_rating(self, movie_id: int) -> float:
        avg, _ = await self.rating_stats(movie_id)
        return avg

    async def average_ratings(self, movie_ids: Iterable[int]) -> Dict[int, float]:
        """Batched averages keyed by movie id; movies without reviews map to 0.0."""
        ids = list(dict.fromkeys(movie_ids))
        if not ids:
            return {}
        result = await self.db.execute(
            select(Review.movie_id, func.avg(Review.rating))
            .where(Review.movie_id.in_(ids))
            .group_by(Review.movie_id)
        )
        averages = {movie_id: 0.0 for movie_id in ids}
        for movie_id, avg in result.all():
            averages[movie_id] = round_rating(avg)
        return averages

    # ── Writes ─────────────────────────────────────────────────────────────
    def add(self, review: Review) -> Review:
        self.db.add(review)
        return review

    async def delete(self, review: Review) -> None:
        await self.db.delete(review)
        await self.db.flush()

    async def delete_for_movie(self, movie_id: int) -> int:
        result = await self.db.execute(
            delete(Review).where(Review.movie_id == movie_id).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def delete_for_user(self, user_id: int) -> int:
        result = await self.db.execute(
            delete(Review).where(Review.user_id == user_id).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0
