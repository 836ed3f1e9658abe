from __future__ import annotations

"""Movie queries. Transactions are owned by the services that call these."""

from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.db.models.movie import Movie


class MovieRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, movie_id: int) -> Optional[Movie]:
        return await self.db.get(Movie, movie_id)

    async def list_all(self) -> List[Movie]:
        result = await self.db.execute(select(Movie).order_by(Movie.title, Movie.id))
        return list(result.scalars().all())

    async def search(self, term: str) -> List[Movie]:
        """Case-insensitive substring match on title OR genre (wildcards are literal)."""
        stmt = (
            select(Movie)
            .where(
                or_(
                    Movie.title.icontains(term, autoescape=True),
                    Movie.genre.icontains(term, autoescape=True),
                )
            )
            .order_by(Movie.title, Movie.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    def add(self, movie: Movie) -> Movie:
        self.db.add(movie)
        return movie

    async def delete(self, movie_id: int) -> int:
        """Delete the movie row; returns the number of rows removed."""
        result = await self.db.execute(
            delete(Movie).where(Movie.id == movie_id).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0
