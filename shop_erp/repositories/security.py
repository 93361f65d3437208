from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from shop_erp.db.models.security import User
from .base import BaseRepository


class SecurityRepository(BaseRepository):
    """Repository for console users."""

    table_name = "app_users"

    async def get_user_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        return await self.scalar_one_or_none(stmt)

    async def create_user(
        self,
        *,
        username: str,
        name: str,
        role: str,
        hashed_password: str,
        is_active: bool = True,
    ) -> User:
        user = User(
            username=username,
            name=name,
            role=role,
            hashed_password=hashed_password,
            is_active=is_active,
        )
        await self.add(user)
        await self.commit()
        # refresh loaded state by reloading
        return (await self.get_user_by_username(username))  # type: ignore
