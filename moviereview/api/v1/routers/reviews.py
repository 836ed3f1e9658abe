# moviereview/api/v1/routers/reviews.py
from __future__ import annotations

"""
Reviews API
===========

Endpoints
---------
GET    /reviews/movie/{movie_id}   public, newest first
GET    /reviews/recent?limit=      public, limit defaults to 10, capped at 50
GET    /reviews/user/{user_id}     public
GET    /reviews/my-reviews         caller's own reviews
GET    /reviews/{review_id}        public
POST   /reviews/movie/{movie_id}   authenticated; one review per movie per user
PUT    /reviews/{review_id}        author only
DELETE /reviews/{review_id}        author or ADMIN

Fixed paths are declared before `/{review_id}` so they are matched first.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.dependencies import get_current_principal, get_current_user
from moviereview.core.exceptions import NotFoundException
from moviereview.core.limiter import rate_limit
from moviereview.db.models.user import User
from moviereview.db.session import get_async_db
from moviereview.schemas.auth import TokenPayload
from moviereview.schemas.review import ReviewInput, ReviewOut
from moviereview.services import review_service

router = APIRouter(prefix="/reviews", tags=["Reviews"])
logger = logging.getLogger(__name__)


def _out(reviews) -> List[ReviewOut]:
    return [ReviewOut.model_validate(r) for r in reviews]


# ──────────────────────────────────────────────────────────────
# 📖 Feeds
# ──────────────────────────────────────────────────────────────
@router.get("/movie/{movie_id}", response_model=List[ReviewOut], summary="Reviews of a movie")
async def reviews_for_movie(movie_id: int, db: AsyncSession = Depends(get_async_db)) -> List[ReviewOut]:
    return _out(await review_service.get_reviews_for_movie(db, movie_id))


@router.get("/recent", response_model=List[ReviewOut], summary="Most recent reviews")
async def recent_reviews(
    limit: Optional[int] = Query(None, description="Defaults to 10; values above 50 are capped"),
    db: AsyncSession = Depends(get_async_db),
) -> List[ReviewOut]:
    return _out(await review_service.get_recent_reviews(db, limit))


@router.get("/my-reviews", response_model=List[ReviewOut], summary="Caller's reviews")
async def my_reviews(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> List[ReviewOut]:
    return _out(await review_service.get_reviews_by_user(db, current_user.id))


@router.get("/user/{user_id}", response_model=List[ReviewOut], summary="Reviews by a user")
async def reviews_by_user(user_id: int, db: AsyncSession = Depends(get_async_db)) -> List[ReviewOut]:
    return _out(await review_service.get_reviews_by_user(db, user_id))


@router.get("/{review_id}", response_model=ReviewOut, summary="Get one review")
async def get_review(review_id: int, db: AsyncSession = Depends(get_async_db)) -> ReviewOut:
    review = await review_service.get_review(db, review_id)
    if review is None:
        raise NotFoundException(f"Review not found with id: {review_id}")
    return ReviewOut.model_validate(review)


# ──────────────────────────────────────────────────────────────
# ✍️ Mutations
# ──────────────────────────────────────────────────────────────
@router.post(
    "/movie/{movie_id}",
    response_model=ReviewOut,
    status_code=status.HTTP_201_CREATED,
    summary="Review a movie",
)
@rate_limit("30/minute")
async def submit_review(
    request: Request,
    response: Response,
    movie_id: int,
    payload: ReviewInput = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> ReviewOut:
    review = await review_service.submit_review(
        db, movie_id, current_user.id, payload.rating, payload.comment
    )
    response.headers["Location"] = str(request.url_for("get_review", review_id=review.id))
    return ReviewOut.model_validate(review)


@router.put("/{review_id}", response_model=ReviewOut, summary="Edit your review")
@rate_limit("30/minute")
async def update_review(
    request: Request,
    response: Response,
    review_id: int,
    payload: ReviewInput = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> ReviewOut:
    review = await review_service.update_review(
        db, review_id, current_user.id, payload.rating, payload.comment
    )
    return ReviewOut.model_validate(review)


@router.delete(
    "/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a review (author or admin)",
)
@rate_limit("30/minute")
async def delete_review(
    request: Request,
    response: Response,
    review_id: int,
    principal: TokenPayload = Depends(get_current_principal),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> Response:
    await review_service.delete_review(
        db, review_id, current_user.id, caller_is_admin=principal.is_admin
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
