# moviereview/api/v1/routers/movies.py
from __future__ import annotations

"""
Movies API
==========

Public reads (list, search, detail, rating) and ADMIN-only management.
Every movie in a response carries its live `average_rating`.
"""

from typing import List

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.dependencies import require_admin
from moviereview.core.exceptions import NotFoundException
from moviereview.core.limiter import rate_limit
from moviereview.db.models.movie import Movie
from moviereview.db.session import get_async_db
from moviereview.schemas.auth import TokenPayload
from moviereview.schemas.movie import MovieCreate, MovieOut, MovieRating, MovieUpdate
from moviereview.services import movie_service

router = APIRouter(prefix="/movies", tags=["Movies"])


async def _with_ratings(db: AsyncSession, movies: List[Movie]) -> List[MovieOut]:
    ratings = await movie_service.average_ratings(db, [m.id for m in movies])
    return [MovieOut.from_movie(m, ratings.get(m.id, 0.0)) for m in movies]


async def _one(db: AsyncSession, movie: Movie) -> MovieOut:
    return MovieOut.from_movie(movie, await movie_service.get_average_rating(db, movie.id))


# ──────────────────────────────────────────────────────────────
# 📖 Public reads
# ──────────────────────────────────────────────────────────────
@router.get("", response_model=List[MovieOut], summary="List all movies")
async def list_movies(db: AsyncSession = Depends(get_async_db)) -> List[MovieOut]:
    return await _with_ratings(db, await movie_service.list_movies(db))


@router.get("/search", response_model=List[MovieOut], summary="Search by title or genre")
async def search_movies(
    query: str = Query("", max_length=255, description="Case-insensitive substring of title or genre"),
    db: AsyncSession = Depends(get_async_db),
) -> List[MovieOut]:
    return await _with_ratings(db, await movie_service.search_movies(db, query))


@router.get("/{movie_id}", response_model=MovieOut, summary="Get one movie")
async def get_movie(movie_id: int, db: AsyncSession = Depends(get_async_db)) -> MovieOut:
    movie = await movie_service.get_movie(db, movie_id)
    if movie is None:
        raise NotFoundException(f"Movie not found with id: {movie_id}")
    return await _one(db, movie)


@router.get("/{movie_id}/rating", response_model=MovieRating, summary="Average rating of a movie")
async def get_movie_rating(movie_id: int, db: AsyncSession = Depends(get_async_db)) -> MovieRating:
    average, count = await movie_service.get_rating_stats(db, movie_id)
    return MovieRating(movie_id=movie_id, average_rating=average, review_count=count)


# ──────────────────────────────────────────────────────────────
# 🛠️ Admin management
# ──────────────────────────────────────────────────────────────
@router.post("", response_model=MovieOut, status_code=status.HTTP_201_CREATED, summary="Create a movie")
@rate_limit("30/minute")
async def create_movie(
    request: Request,
    response: Response,
    payload: MovieCreate = Body(...),
    _admin: TokenPayload = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> MovieOut:
    movie = await movie_service.create_movie(db, payload.model_dump())
    response.headers["Location"] = str(request.url_for("get_movie", movie_id=movie.id))
    return MovieOut.from_movie(movie, 0.0)


@router.put("/{movie_id}", response_model=MovieOut, summary="Update a movie (partial)")
@rate_limit("30/minute")
async def update_movie(
    request: Request,
    response: Response,
    movie_id: int,
    payload: MovieUpdate = Body(...),
    _admin: TokenPayload = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> MovieOut:
    movie = await movie_service.update_movie(db, movie_id, payload.model_dump(exclude_none=True))
    return await _one(db, movie)


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a movie and its reviews",
)
@rate_limit("30/minute")
async def delete_movie(
    request: Request,
    response: Response,
    movie_id: int,
    _admin: TokenPayload = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> Response:
    await movie_service.delete_movie(db, movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
