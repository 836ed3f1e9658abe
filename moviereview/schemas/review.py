from __future__ import annotations

"""Review schemas. Output rows are denormalized with movie title and username."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from moviereview.db.models.review import COMMENT_MAX, RATING_MAX, RATING_MIN


class ReviewInput(BaseModel):
    """Body for submitting or editing a review. Dates and ids are server-assigned."""

    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    comment: Optional[str] = Field(None, max_length=COMMENT_MAX)


class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    movie_id: int
    movie_title: Optional[str] = None
    user_id: int
    username: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    review_date: datetime


__all__ = ["ReviewInput", "ReviewOut"]
