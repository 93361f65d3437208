from __future__ import annotations

from sqlalchemy import Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin


class User(IntPkMixin, TimestampMixin, Base):
    """Console user allowed to sign in."""
    __tablename__ = "app_users"

    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="Operator", server_default="Operator")
    hashed_password: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
