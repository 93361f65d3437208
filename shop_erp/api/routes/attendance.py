"""
Attendance page: daily marking, bulk marking, CSV template/export/upload and
the monthly summary tab.
"""
from __future__ import annotations

import calendar
import datetime as dt
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import redirect, render_page, with_query
from shop_erp.core.deps import get_session, require_identity
from shop_erp.core.errors import StoreError
from shop_erp.schemas.attendance import AttendanceForm, BulkMarkForm
from shop_erp.schemas.auth import Identity
from shop_erp.services.attendance import (
    PREVIEW_ROWS,
    STATUS_LABELS,
    AttendanceService,
    attendance_percentage,
    build_template_csv,
    parse_attendance_csv,
    percentage_tone,
)
from shop_erp.ui.dialog import FormDialog
from shop_erp.ui.export import csv_response, dataframe_csv_response
from shop_erp.ui.formatting import badge, status_badge
from shop_erp.ui.forms import FormField, form_values, option_list, parse_form, render_form
from shop_erp.ui.table import Column, DataTable, filter_records
from shop_erp.ui.templating import render_fragment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["Attendance"])

TEMPLATE_FILENAME = "attendance_template.csv"
EXPORT_FILENAME = "attendance_export.csv"
MISSING_SELECTION = "Please select employee and date"

DAILY_COLUMNS = [
    Column("employee.employee_code", "Emp Code"),
    Column("employee.name", "Name"),
    Column("employee.department", "Department"),
    Column("status", "Status", lambda v, _: status_badge(v, STATUS_LABELS.get(v, v))),
    Column("in_time", "In"),
    Column("out_time", "Out"),
    Column("ot_hours", "OT Hours"),
    Column("notes", "Notes"),
]


def _percentage_cell(_value: Any, summary: Any) -> Markup:
    percentage = attendance_percentage(summary.total_present_days, summary.total_working_days)
    return badge(f"{percentage}%", percentage_tone(percentage))


MONTHLY_COLUMNS = [
    Column("employee.employee_code", "Emp Code"),
    Column("employee.name", "Name"),
    Column("total_working_days", "Working Days"),
    Column("total_present_days", "Present"),
    Column("total_absent_days", "Absent"),
    Column("total_leaves", "Leaves"),
    Column("total_ot_hours", "OT Hours"),
    Column("percentage", "Attendance %", _percentage_cell),
]
MONTHS = [(number, calendar.month_name[number]) for number in range(1, 13)]


def _mark_fields(employees) -> List[FormField]:
    return [
        FormField("employee_id", "Employee", kind="select", required=True, options=option_list(employees)),
        FormField("date", "Date", kind="date", required=True),
        FormField(
            "status", "Status", kind="select", options=[(key, label) for key, label in STATUS_LABELS.items()]
        ),
        FormField("ot_hours", "OT Hours", kind="number", step="0.5"),
        FormField("notes", "Notes", kind="textarea", wide=True),
    ]


async def _mark_dialog(
    service: AttendanceService, values: Mapping[str, Any], errors: Optional[Mapping[str, str]] = None
) -> Markup:
    employees = await service.list_active_employees()
    content = render_form(
        _mark_fields(employees),
        action="/attendance/mark",
        values=values,
        errors=errors,
        submit_label="Save",
        cancel_url=with_query("/attendance", tab="daily", date=values.get("date")),
    )
    return FormDialog("Mark Attendance", with_query("/attendance", tab="daily", date=values.get("date"))).render(
        True, content
    )


async def _render_attendance(
    request: Request,
    identity: Identity,
    service: AttendanceService,
    *,
    tab: str = "daily",
    day: Optional[dt.date] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    q: Optional[str] = None,
    dialog: Markup | str = "",
    alert: Optional[str] = None,
    notice: Optional[str] = None,
    preview: Optional[List[Dict[str, str]]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    today = dt.date.today()
    day = day or today
    month = month or today.month
    year = year or today.year
    context: Dict[str, Any] = {
        "tab": tab,
        "day": day.isoformat(),
        "month": month,
        "year": year,
        "months": MONTHS,
        "years": list(range(today.year - 3, today.year + 2)),
        "search": q,
        "daily_table": "",
        "monthly_table": "",
        "preview": None,
    }
    if preview is not None:
        context.update(
            preview=preview[:PREVIEW_ROWS], preview_total=len(preview), preview_json=json.dumps(preview)
        )
    if tab == "monthly":
        summaries = filter_records(await service.list_summaries(month, year), q, "employee.name")
        context["monthly_table"] = DataTable(MONTHLY_COLUMNS, actions=False).render(summaries)
    else:
        records = filter_records(await service.list_daily(day), q, "employee.name")
        table = DataTable(
            DAILY_COLUMNS,
            on_edit=lambda r: with_query("/attendance", tab="daily", date=r.date.isoformat(), dialog="mark", record=r.id),
        )
        context["daily_table"] = table.render(records)
    return render_page(
        request,
        "pages/attendance.html",
        identity=identity,
        dialog=dialog,
        alert=alert,
        notice=notice,
        status_code=status_code,
        **context,
    )


# PUBLIC_INTERFACE
@router.get("", response_class=HTMLResponse, summary="Attendance page")
async def attendance_page(
    request: Request,
    tab: str = Query("daily", pattern="^(daily|monthly)$"),
    day: Optional[dt.date] = Query(None, alias="date"),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    q: Optional[str] = Query(None),
    dialog: Optional[str] = Query(None),
    record: Optional[int] = Query(None),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Daily tab (records for ``date``, filtered by employee name) or monthly
    tab (summary for ``month``/``year`` with attendance percentage).

    ``dialog=mark`` opens the mark dialog; with ``record`` it edits that record.
    """
    service = AttendanceService(session)
    mark_dialog: Markup | str = ""
    if dialog == "mark":
        if record is not None:
            values = form_values(await service.get_record(record), _mark_fields([]))
        else:
            values = {"date": (day or dt.date.today()).isoformat(), "status": "present", "ot_hours": "0"}
        mark_dialog = await _mark_dialog(service, values)
    return await _render_attendance(
        request, identity, service, tab=tab, day=day, month=month, year=year, q=q, dialog=mark_dialog
    )


# PUBLIC_INTERFACE
@router.post("/mark", response_class=HTMLResponse, summary="Save attendance for one employee-day")
async def mark_attendance(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Insert or update the record keyed by employee and date."""
    service = AttendanceService(session)
    posted = dict(await request.form())
    if not str(posted.get("employee_id") or "").strip() or not str(posted.get("date") or "").strip():
        dialog = await _mark_dialog(service, posted)
        return await _render_attendance(
            request, identity, service, dialog=dialog, alert=MISSING_SELECTION, status_code=422
        )
    data, errors = parse_form(AttendanceForm, posted)
    if data is None:
        dialog = await _mark_dialog(service, posted, errors)
        return await _render_attendance(request, identity, service, dialog=dialog, status_code=422)
    try:
        await service.save_record(data)
    except StoreError as exc:
        logger.exception("Saving attendance failed")
        dialog = await _mark_dialog(service, posted)
        return await _render_attendance(
            request, identity, service, day=data.date, dialog=dialog, alert=exc.message, status_code=400
        )
    return redirect(with_query("/attendance", tab="daily", date=data.date.isoformat()))


# PUBLIC_INTERFACE
@router.get("/bulk", response_class=HTMLResponse, summary="Confirm bulk marking")
async def confirm_bulk_mark(
    request: Request,
    day: dt.date = Query(..., alias="date"),
    status: str = Query("present", pattern="^(present|sunday|holiday)$"),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    back = with_query("/attendance", tab="daily", date=day.isoformat())
    content = render_fragment(
        "components/confirm.html",
        message=f"Mark all active employees as {STATUS_LABELS[status]} for {day.isoformat()}?",
        action="/attendance/bulk",
        cancel_url=back,
        hidden={"date": day.isoformat(), "status": status},
        confirm_label="Confirm",
        button_class="btn-success",
    )
    dialog = FormDialog("Bulk Mark Attendance", back, "sm").render(True, content)
    return await _render_attendance(request, identity, AttendanceService(session), day=day, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("/bulk", response_class=HTMLResponse, summary="Mark every active employee")
async def bulk_mark(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    service = AttendanceService(session)
    data, errors = parse_form(BulkMarkForm, dict(await request.form()))
    if data is None:
        return await _render_attendance(
            request, identity, service, alert="; ".join(f"{k}: {v}" for k, v in errors.items()), status_code=422
        )
    try:
        count = await service.bulk_mark(data.date, data.status)
    except StoreError as exc:
        logger.exception("Bulk attendance marking failed")
        return await _render_attendance(request, identity, service, day=data.date, alert=exc.message, status_code=400)
    return await _render_attendance(
        request,
        identity,
        service,
        day=data.date,
        notice=f"Marked {count} employees as {STATUS_LABELS[data.status]}",
    )


# PUBLIC_INTERFACE
@router.get("/template.csv", summary="Download the upload template")
async def download_template(identity: Identity = Depends(require_identity)):
    return csv_response(build_template_csv(), TEMPLATE_FILENAME)


# PUBLIC_INTERFACE
@router.get("/export.csv", summary="Export attendance records")
async def export_attendance(
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    frame = await AttendanceService(session).export_frame()
    return dataframe_csv_response(frame, EXPORT_FILENAME)


# PUBLIC_INTERFACE
@router.post("/upload", response_class=HTMLResponse, summary="Preview an attendance CSV")
async def upload_attendance(
    request: Request,
    file: UploadFile = File(...),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Parse the upload and show the first rows; nothing is stored until the preview is saved."""
    rows = parse_attendance_csv(await file.read())
    logger.info("Previewing %d attendance rows from %s", len(rows), file.filename)
    return await _render_attendance(request, identity, AttendanceService(session), preview=rows)


# PUBLIC_INTERFACE
@router.post("/upload/save", response_class=HTMLResponse, summary="Save previewed attendance rows")
async def save_uploaded_attendance(
    request: Request,
    rows: str = Form("[]"),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    service = AttendanceService(session)
    try:
        parsed = json.loads(rows)
    except ValueError:
        return await _render_attendance(request, identity, service, alert="Upload data is unreadable", status_code=400)
    if not isinstance(parsed, list):
        parsed = []
    saved = await service.import_rows(row for row in parsed if isinstance(row, dict))
    return await _render_attendance(request, identity, service, notice=f"Saved {saved} attendance records")


# PUBLIC_INTERFACE
@router.post("/summary/rebuild", summary="Rebuild the monthly summary")
async def rebuild_summary(
    month: int = Form(..., ge=1, le=12),
    year: int = Form(..., ge=2000, le=2100),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    await AttendanceService(session).rebuild_summary(month, year)
    return redirect(with_query("/attendance", tab="monthly", month=month, year=year))
