from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """
    Base class for services. Holds a session shared by the repositories a page
    touches, so two-table side effects run against the same store connection.

    Services keep derived-field rules and orchestration; data access is
    delegated to repositories.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
