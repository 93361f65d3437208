from __future__ import annotations

from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin


class Inspection(IntPkMixin, TimestampMixin, Base):
    """Quality inspection against a job (first-off, in-process, final)."""
    __tablename__ = "inspections"

    insp_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    job_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    insp_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    result: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
