from __future__ import annotations

"""User lookups. Absence is `None`, never an exception."""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moviereview.db.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def username_exists(self, username: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.username == username).limit(1))
        return result.first() is not None

    async def email_exists(self, email: str) -> bool:
        result = await self.db.execute(
            select(User.id).where(func.lower(User.email) == email.lower()).limit(1)
        )
        return result.first() is not None

    def add(self, user: User) -> User:
        self.db.add(user)
        return user

    async def delete(self, user_id: int) -> int:
        result = await self.db.execute(
            delete(User).where(User.id == user_id).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0
