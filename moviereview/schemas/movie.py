from __future__ import annotations

"""Movie request/response schemas. `average_rating` is output-only."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from moviereview.db.models.movie import (
    DESCRIPTION_MAX,
    DIRECTOR_MAX,
    GENRE_MAX,
    POSTER_URL_MAX,
    TITLE_MAX,
    Movie,
)


class MovieBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX)
    release_date: Optional[date] = None
    director: Optional[str] = Field(None, max_length=DIRECTOR_MAX)
    genre: Optional[str] = Field(None, max_length=GENRE_MAX)
    poster_url: Optional[str] = Field(None, max_length=POSTER_URL_MAX)
    duration: Optional[int] = Field(None, ge=1, description="Runtime in minutes")


class MovieCreate(MovieBase):
    pass


class MovieUpdate(BaseModel):
    """Partial update: omitted or null fields keep their stored value."""

    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX)
    release_date: Optional[date] = None
    director: Optional[str] = Field(None, max_length=DIRECTOR_MAX)
    genre: Optional[str] = Field(None, max_length=GENRE_MAX)
    poster_url: Optional[str] = Field(None, max_length=POSTER_URL_MAX)
    duration: Optional[int] = Field(None, ge=1)


class MovieOut(MovieBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    average_rating: float = 0.0
    created_at: Optional[datetime] = None

    @classmethod
    def from_movie(cls, movie: Movie, average_rating: float = 0.0) -> "MovieOut":
        out = cls.model_validate(movie)
        out.average_rating = average_rating
        return out


class MovieRating(BaseModel):
    movie_id: int
    average_rating: float
    review_count: int


__all__ = ["MovieBase", "MovieCreate", "MovieUpdate", "MovieOut", "MovieRating"]
