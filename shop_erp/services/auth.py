from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.core.security import get_password_hash, verify_password
from shop_erp.repositories.security import SecurityRepository
from shop_erp.schemas.auth import Identity
from shop_erp.services.base import BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Credential checks against the console user table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = SecurityRepository(session)

    # PUBLIC_INTERFACE
    async def authenticate(self, username: str, password: str) -> Optional[Identity]:
        """Return the identity for valid credentials of an active user, else None."""
        user = await self.repo.get_user_by_username(username)
        if user is None or not user.is_active or not verify_password(password, user.hashed_password):
            logger.info("Failed sign-in for %s", username)
            return None
        logger.info("User %s signed in", username)
        return Identity(username=user.username, name=user.name, role=user.role)

    async def ensure_user(self, *, username: str, password: str, name: str, role: str) -> bool:
        """Create the user when missing; returns True if one was created."""
        if await self.repo.get_user_by_username(username) is not None:
            return False
        await self.repo.create_user(
            username=username, name=name, role=role, hashed_password=get_password_hash(password)
        )
        logger.info("Created console user %s", username)
        return True
