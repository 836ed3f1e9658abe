# moviereview/api/v1/routers/users.py
from __future__ import annotations

"""Account lookups for authenticated callers, plus ADMIN-only deletion."""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.core.dependencies import get_current_user, require_admin
from moviereview.core.exceptions import NotFoundException
from moviereview.core.limiter import rate_limit
from moviereview.db.models.user import User
from moviereview.db.session import get_async_db
from moviereview.schemas.auth import TokenPayload
from moviereview.schemas.user import UserOut
from moviereview.services import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserOut, summary="Current account")
async def read_me(current_user: User = Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(current_user)


@router.get("/username/{username}", response_model=UserOut, summary="Find by username")
async def get_by_username(
    username: str,
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> UserOut:
    user = await user_service.find_by_username(db, username)
    if user is None:
        raise NotFoundException(f"User not found: {username}")
    return UserOut.model_validate(user)


@router.get("/{user_id}", response_model=UserOut, summary="Find by id")
async def get_by_id(
    user_id: int,
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> UserOut:
    user = await user_service.find_by_id(db, user_id)
    if user is None:
        raise NotFoundException(f"User not found with id: {user_id}")
    return UserOut.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an account and its reviews",
)
@rate_limit("30/minute")
async def delete_user(
    request: Request,
    response: Response,
    user_id: int,
    _admin: TokenPayload = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> Response:
    await user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
