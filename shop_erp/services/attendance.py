from __future__ import annotations

import datetime as dt
import io
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Union

import pandas as pd
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.core.errors import NotFound
from shop_erp.db.models.attendance import AttendanceRecord, AttendanceSummary
from shop_erp.db.models.master_data import Employee
from shop_erp.repositories.attendance import AttendanceRecordRepository, AttendanceSummaryRepository
from shop_erp.repositories.master_data import EmployeeRepository
from shop_erp.schemas.attendance import AttendanceCsvRow, AttendanceForm
from shop_erp.services.base import BaseService

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["emp_id", "date", "in_time", "out_time", "worked_hours"]
TEMPLATE_ROWS = [
    {"emp_id": "1", "date": "2025-10-07", "in_time": "08:00", "out_time": "17:00", "worked_hours": "9.0"},
    {"emp_id": "2", "date": "2025-10-07", "in_time": "08:00", "out_time": "17:00", "worked_hours": "9.0"},
]
EXPORT_COLUMNS = ["emp_id", "employee", "date", "status", "in_time", "out_time", "worked_hours", "ot_hours"]
PREVIEW_ROWS = 10

STATUS_LABELS = {
    "present": "Present",
    "absent": "Absent",
    "leave": "Leave",
    "sick_leave": "Sick Leave",
    "paid_leave": "Paid Leave",
    "holiday": "Holiday",
    "sunday": "Sunday",
    "half_day": "Half Day",
}
NON_WORKING = ("sunday", "holiday")
LEAVE_STATUSES = ("leave", "sick_leave", "paid_leave")
BULK_STATUSES = ("present", "sunday", "holiday")


# PUBLIC_INTERFACE
def attendance_percentage(present_days: Union[Decimal, float, int], working_days: Union[Decimal, float, int]) -> str:
    """present/working * 100 to one decimal place, or ``"0"`` when there are no working days."""
    if not working_days or working_days <= 0:
        return "0"
    return f"{float(present_days) / float(working_days) * 100:.1f}"


def percentage_tone(percentage: str) -> str:
    value = float(percentage)
    if value >= 90:
        return "success"
    if value >= 75:
        return "warning"
    return "danger"


def month_bounds(month: int, year: int) -> tuple[dt.date, dt.date]:
    start = dt.date(year, month, 1)
    end = dt.date(year + 1, 1, 1) if month == 12 else dt.date(year, month + 1, 1)
    return start, end


# PUBLIC_INTERFACE
def build_template_csv() -> str:
    """CSV template for bulk attendance uploads (header plus two sample rows)."""
    return pd.DataFrame(TEMPLATE_ROWS, columns=CSV_COLUMNS).to_csv(index=False)


# PUBLIC_INTERFACE
def parse_attendance_csv(content: Union[bytes, str]) -> List[Dict[str, str]]:
    """
    Read an uploaded attendance CSV into row dicts keyed by the template header.

    Every value is kept as stripped text. Rows without ``emp_id`` or ``date``
    and rows with more fields than the header are dropped without notice;
    undecodable bytes are replaced.
    """
    text = content.decode("utf-8-sig", errors="replace") if isinstance(content, bytes) else content
    if not text.strip():
        return []
    frame = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        on_bad_lines="skip",
        engine="python",
    )
    # short rows are padded with NaN
    frame = frame.fillna("")
    frame.columns = [str(col).strip() for col in frame.columns]
    for column in CSV_COLUMNS:
        if column not in frame.columns:
            frame[column] = ""
        frame[column] = frame[column].astype(str).str.strip()
    frame = frame.loc[(frame["emp_id"] != "") & (frame["date"] != ""), CSV_COLUMNS]
    return frame.to_dict(orient="records")


def _normalize_row(row: Mapping[str, str]) -> Dict[str, str]:
    return {key: value for key, value in row.items() if value not in ("", None)}


class AttendanceService(BaseService):
    """Daily attendance marking, CSV interchange and monthly summaries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.records = AttendanceRecordRepository(session)
        self.summaries = AttendanceSummaryRepository(session)
        self.employees = EmployeeRepository(session)

    async def list_active_employees(self) -> List[Employee]:
        return await self.employees.list_active()

    async def list_daily(self, day: dt.date) -> List[AttendanceRecord]:
        return await self.records.list_for_date(day)

    async def get_record(self, record_id: int) -> AttendanceRecord:
        record = await self.records.get(record_id)
        if record is None:
            raise NotFound("attendance_records", record_id)
        return record

    # PUBLIC_INTERFACE
    async def save_record(self, form: AttendanceForm) -> AttendanceRecord:
        """Insert or update the record for (employee, date)."""
        return await self.records.upsert(
            {"employee_id": form.employee_id, "date": form.date},
            {"status": form.status, "ot_hours": form.ot_hours, "notes": form.notes or ""},
        )

    # PUBLIC_INTERFACE
    async def bulk_mark(self, day: dt.date, status: str) -> int:
        """Mark every active employee with ``status`` for ``day``; returns how many were marked."""
        if status not in BULK_STATUSES:
            raise ValueError(f"Unsupported bulk status: {status}")
        employees = await self.employees.list_active()
        for employee in employees:
            await self.records.upsert(
                {"employee_id": employee.id, "date": day},
                {"status": status, "ot_hours": Decimal("0")},
            )
        logger.info("Marked %d employees %s for %s", len(employees), status, day.isoformat())
        return len(employees)

    # PUBLIC_INTERFACE
    async def import_rows(self, rows: Iterable[Mapping[str, str]]) -> int:
        """
        Save previewed CSV rows as present-day records with punch times.

        Rows that fail to parse or name an unknown employee are skipped.
        """
        known = {employee.id for employee in await self.employees.list()}
        saved = 0
        for raw in rows:
            try:
                row = AttendanceCsvRow.model_validate(_normalize_row(raw))
            except ValidationError:
                logger.warning("Skipping unreadable attendance row: %s", dict(raw))
                continue
            if row.emp_id not in known:
                logger.warning("Skipping attendance row for unknown employee %s", row.emp_id)
                continue
            await self.records.upsert(
                {"employee_id": row.emp_id, "date": row.date},
                {
                    "status": "present",
                    "in_time": row.in_time,
                    "out_time": row.out_time,
                    "worked_hours": row.worked_hours,
                },
            )
            saved += 1
        logger.info("Imported %d attendance rows", saved)
        return saved

    async def export_frame(self) -> pd.DataFrame:
        records = await self.records.list(order_by=("-date", "employee_id"))
        rows = [
            {
                "emp_id": record.employee_id,
                "employee": record.employee.name if record.employee else "",
                "date": record.date.isoformat(),
                "status": record.status,
                "in_time": record.in_time or "",
                "out_time": record.out_time or "",
                "worked_hours": record.worked_hours if record.worked_hours is not None else "",
                "ot_hours": record.ot_hours,
            }
            for record in records
        ]
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    async def list_summaries(self, month: int, year: int) -> List[AttendanceSummary]:
        return await self.summaries.list_for_period(month, year)

    # PUBLIC_INTERFACE
    async def rebuild_summary(self, month: int, year: int) -> int:
        """
        Recompute the monthly totals for every employee with records in the period.

        Sundays and holidays are not working days; a half day counts as half a
        present day.
        """
        start, end = month_bounds(month, year)
        totals: Dict[int, Dict[str, Decimal]] = defaultdict(
            lambda: {
                "total_working_days": Decimal("0"),
                "total_present_days": Decimal("0"),
                "total_absent_days": Decimal("0"),
                "total_leaves": Decimal("0"),
                "total_ot_hours": Decimal("0"),
            }
        )
        for record in await self.records.list_between(start, end):
            bucket = totals[record.employee_id]
            bucket["total_ot_hours"] += Decimal(str(record.ot_hours or 0))
            if record.status in NON_WORKING:
                continue
            bucket["total_working_days"] += 1
            if record.status == "present":
                bucket["total_present_days"] += 1
            elif record.status == "half_day":
                bucket["total_present_days"] += Decimal("0.5")
            elif record.status == "absent":
                bucket["total_absent_days"] += 1
            elif record.status in LEAVE_STATUSES:
                bucket["total_leaves"] += 1
        for employee_id, values in totals.items():
            await self.summaries.upsert({"employee_id": employee_id, "month": month, "year": year}, values)
        logger.info("Rebuilt attendance summary for %02d/%d (%d employees)", month, year, len(totals))
        return len(totals)
