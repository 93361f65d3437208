from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_erp.db.base import Base, IntPkMixin, TimestampMixin
from shop_erp.db.models.master_data import Employee


class AttendanceRecord(IntPkMixin, TimestampMixin, Base):
    """One employee's attendance for one day."""
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_records_employee_date"),
    )

    employee_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="present", server_default="present")
    ot_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=0, server_default="0")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # punch times, filled from CSV uploads
    in_time: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    out_time: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    worked_hours: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 2), nullable=True)

    employee: Mapped[Employee] = relationship(Employee, lazy="selectin")


class AttendanceSummary(IntPkMixin, TimestampMixin, Base):
    """Monthly attendance totals per employee."""
    __tablename__ = "attendance_summary"
    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="uq_attendance_summary_employee_period"),
    )

    employee_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_working_days: Mapped[Decimal] = mapped_column(Numeric(6, 1), nullable=False, default=0)
    total_present_days: Mapped[Decimal] = mapped_column(Numeric(6, 1), nullable=False, default=0)
    total_absent_days: Mapped[Decimal] = mapped_column(Numeric(6, 1), nullable=False, default=0)
    total_leaves: Mapped[Decimal] = mapped_column(Numeric(6, 1), nullable=False, default=0)
    total_ot_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=0)

    employee: Mapped[Employee] = relationship(Employee, lazy="selectin")
