from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.core.errors import LoginRequired
from shop_erp.core.logging import username_var
from shop_erp.core.security import SessionGuard
from shop_erp.core.settings import get_app_settings
from shop_erp.db.session import get_async_session
from shop_erp.schemas.auth import Identity

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
async def get_session(
    session: AsyncSession = Depends(get_async_session),
) -> AsyncSession:
    """Return the request-scoped AsyncSession bound to the configured store."""
    return session


# PUBLIC_INTERFACE
def get_session_guard(request: Request) -> SessionGuard:
    """Build a SessionGuard restored from the identity cookie on this request."""
    settings = get_app_settings()
    guard = SessionGuard()
    guard.restore(request.cookies.get(settings.SESSION_COOKIE_NAME))
    return guard


# PUBLIC_INTERFACE
def require_identity(guard: SessionGuard = Depends(get_session_guard)) -> Identity:
    """
    Gate a page behind a signed-in identity.

    Raises:
        LoginRequired: when no valid identity is persisted; handled as a redirect to the login page.
    """
    if not guard.is_authenticated or guard.identity is None:
        raise LoginRequired()
    username_var.set(guard.identity.username)
    return guard.identity
