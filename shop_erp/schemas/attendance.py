from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

AttendanceStatus = Literal[
    "present", "absent", "half_day", "leave", "sick_leave", "paid_leave", "sunday", "holiday"
]


class AttendanceForm(BaseModel):
    """Mark/edit payload for one employee-day."""
    employee_id: int
    date: dt.date
    status: AttendanceStatus = Field("present")
    ot_hours: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = Field(None)


class BulkMarkForm(BaseModel):
    """Mark every active employee for one day."""
    date: dt.date
    status: Literal["present", "sunday", "holiday"] = Field("present")


class AttendanceCsvRow(BaseModel):
    """One row of an attendance upload."""
    emp_id: int
    date: dt.date
    in_time: Optional[str] = Field(None)
    out_time: Optional[str] = Field(None)
    worked_hours: Optional[Decimal] = Field(None)
