from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import render_page
from shop_erp.core.deps import get_session, require_identity
from shop_erp.schemas.auth import Identity
from shop_erp.services.reports import REPORTS, ReportService
from shop_erp.ui.export import dataframe_csv_response
from shop_erp.ui.formatting import format_inr, status_badge
from shop_erp.ui.table import Column, DataTable

router = APIRouter(prefix="/reports", tags=["Reports"])

REPORT_COLUMNS = {
    "monthly-turnover": [
        Column("month", "Month"),
        Column("amount", "Amount", lambda v, _: format_inr(v)),
    ],
    "jobs": [
        Column("job_id", "Job ID"),
        Column("customer", "Customer"),
        Column("status", "Status", lambda v, _: status_badge(v)),
        Column("total_cost", "Total Cost", lambda v, _: format_inr(v)),
    ],
    "pending-challans": [
        Column("challan_no", "Challan No"),
        Column("job_id", "Job ID"),
        Column("customer", "Customer"),
        Column("status", "Status", lambda v, _: status_badge(v)),
    ],
}


# PUBLIC_INTERFACE
@router.get("", response_class=HTMLResponse, summary="Reports overview")
async def reports_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Monthly turnover, jobs report and pending challans, each with a CSV export link."""
    service = ReportService(session)
    reports = []
    for key, (_filename, title) in REPORTS.items():
        frame = await service.build(key)
        table = DataTable(REPORT_COLUMNS[key], actions=False)
        reports.append({"key": key, "title": title, "table": table.render(frame.to_dict(orient="records"))})
    return render_page(request, "pages/reports.html", identity=identity, reports=reports)


# PUBLIC_INTERFACE
@router.get("/{key}.csv", summary="Export a report as CSV")
async def export_report(
    key: str,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    if key not in REPORTS:
        raise HTTPException(status_code=404, detail=f"Unknown report: {key}")
    filename, _title = REPORTS[key]
    frame = await ReportService(session).build(key)
    return dataframe_csv_response(frame, filename)
