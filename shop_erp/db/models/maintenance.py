from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin
from shop_erp.db.models.master_data import Machine


class MaintenanceRecord(IntPkMixin, TimestampMixin, Base):
    """Preventive or breakdown maintenance on a machine."""
    __tablename__ = "maintenance"

    maintenance_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    machine_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("machines.id", ondelete="SET NULL"), nullable=True
    )
    type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # preventive/breakdown
    scheduled_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    completed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    downtime_hours: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    machine: Mapped[Optional[Machine]] = relationship(Machine, lazy="selectin")
