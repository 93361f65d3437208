from __future__ import annotations

import datetime as dt
from typing import List

from sqlalchemy import and_, select

from shop_erp.db.models.attendance import AttendanceRecord, AttendanceSummary
from shop_erp.db.models.master_data import Employee
from .base import CrudRepository


class AttendanceRecordRepository(CrudRepository[AttendanceRecord]):
    """Repository for daily attendance records."""
    model = AttendanceRecord

    async def list_for_date(self, day: dt.date) -> List[AttendanceRecord]:
        stmt = (
            select(AttendanceRecord)
            .join(Employee, Employee.id == AttendanceRecord.employee_id)
            .where(AttendanceRecord.date == day)
            .order_by(Employee.name, AttendanceRecord.id)
        )
        return list(await self.scalars(stmt))

    async def list_between(self, start: dt.date, end: dt.date) -> List[AttendanceRecord]:
        """Records with ``start <= date < end``."""
        stmt = (
            select(AttendanceRecord)
            .where(and_(AttendanceRecord.date >= start, AttendanceRecord.date < end))
            .order_by(AttendanceRecord.employee_id, AttendanceRecord.date)
        )
        return list(await self.scalars(stmt))


class AttendanceSummaryRepository(CrudRepository[AttendanceSummary]):
    """Repository for monthly attendance totals."""
    model = AttendanceSummary

    async def list_for_period(self, month: int, year: int) -> List[AttendanceSummary]:
        stmt = (
            select(AttendanceSummary)
            .join(Employee, Employee.id == AttendanceSummary.employee_id)
            .where(AttendanceSummary.month == month, AttendanceSummary.year == year)
            .order_by(Employee.name, AttendanceSummary.id)
        )
        return list(await self.scalars(stmt))
