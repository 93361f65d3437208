from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import redirect, render_page
from shop_erp.core.deps import get_session, require_identity
from shop_erp.repositories.master_data import CustomerRepository
from shop_erp.repositories.production import JobRepository
from shop_erp.schemas.auth import Identity
from shop_erp.schemas.production import ChallanForm
from shop_erp.services.production import ProductionService
from shop_erp.ui.dialog import FormDialog
from shop_erp.ui.formatting import format_date, status_badge
from shop_erp.ui.forms import FormField, option_list, parse_form, render_form
from shop_erp.ui.table import Column, DataTable
from shop_erp.ui.templating import render_fragment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/challans", tags=["Challans"])

PROCESS_TYPES = ("Zinc Plating", "Nickel Plating", "Chrome Plating", "Anodizing")

CHALLAN_COLUMNS = [
    Column("challan_no", "Challan No"),
    Column("job_id", "Job ID"),
    Column("customer.name", "Customer"),
    Column("qty_sent", "Qty Sent"),
    Column("process_type", "Process"),
    Column("date_sent", "Date Sent", lambda v, _: format_date(v)),
    Column("expected_return_date", "Expected Return", lambda v, _: format_date(v)),
    Column("status", "Status", lambda v, _: status_badge(v, str(v).upper())),
]


async def _challan_dialog(session: AsyncSession, values, errors) -> Markup:
    jobs = await JobRepository(session).list()
    customers = await CustomerRepository(session).list(order_by=("name", "id"))
    fields = [
        FormField(
            "job_id",
            "Job",
            kind="select",
            required=True,
            options=[(job.job_id, f"{job.job_id} - {job.part_no or ''}") for job in jobs],
        ),
        FormField("customer_id", "Customer", kind="select", options=option_list(customers)),
        FormField("qty_sent", "Qty Sent", kind="number", required=True),
        FormField("process_type", "Process Type", kind="select", options=[(p, p) for p in PROCESS_TYPES]),
        FormField("thickness", "Thickness"),
        FormField("date_sent", "Date Sent", kind="date"),
        FormField("expected_return_date", "Expected Return", kind="date"),
        FormField("params_note", "Process Parameters", kind="textarea"),
    ]
    content = render_form(
        fields, action="/challans", values=values, errors=errors, submit_label="Create Challan", cancel_url="/challans"
    )
    return FormDialog("Create Plating Challan", "/challans", "lg").render(True, content)


async def _render_challans(
    request: Request,
    identity: Identity,
    session: AsyncSession,
    *,
    dialog: Markup | str = "",
    status_code: int = 200,
) -> HTMLResponse:
    service = ProductionService(session)
    challans = await service.list_challans()
    pending = await service.pending_challan_count()
    table = DataTable(CHALLAN_COLUMNS, on_view=lambda c: f"/challans/{c.id}/receive")
    return render_page(
        request,
        "pages/list.html",
        identity=identity,
        heading="Plating Challans",
        subtitle=f"Manage plating challans - {pending} pending",
        actions=[{"label": "Create Challan", "url": "/challans/new"}],
        stats=[{"label": "Pending Challans", "value": pending}],
        table=table.render(challans),
        dialog=dialog,
        status_code=status_code,
    )


# PUBLIC_INTERFACE
@router.get("", response_class=HTMLResponse, summary="List plating challans")
async def challans_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    return await _render_challans(request, identity, session)


# PUBLIC_INTERFACE
@router.get("/new", response_class=HTMLResponse, summary="Create challan dialog")
async def new_challan_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    dialog = await _challan_dialog(session, {"process_type": "Zinc Plating", "thickness": "10-15 microns"}, {})
    return await _render_challans(request, identity, session, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("", response_class=HTMLResponse, summary="Create challan")
async def create_challan(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Send goods out for plating; the linked job moves to ``pending-challan``."""
    posted = await request.form()
    data, errors = parse_form(ChallanForm, posted)
    if data is None:
        dialog = await _challan_dialog(session, dict(posted), errors)
        return await _render_challans(request, identity, session, dialog=dialog, status_code=422)
    await ProductionService(session).create_challan(data)
    return redirect("/challans")


# PUBLIC_INTERFACE
@router.get("/{challan_id}/receive", response_class=HTMLResponse, summary="Challan details / receive confirmation")
async def receive_challan_page(
    challan_id: int,
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """A sent challan asks for confirmation before it is marked received."""
    challan = await ProductionService(session).get_challan(challan_id)
    if challan.status == "sent":
        content = render_fragment(
            "components/confirm.html",
            message=f"Mark challan {challan.challan_no} as received?",
            action=f"/challans/{challan.id}/receive",
            cancel_url="/challans",
            confirm_label="Mark Received",
            button_class="btn-success",
        )
    else:
        content = Markup("<p>Challan {} was received on {}.</p>").format(
            challan.challan_no, format_date(challan.date_received)
        )
    dialog = FormDialog(f"Challan {challan.challan_no}", "/challans", "sm").render(True, content)
    return await _render_challans(request, identity, session, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("/{challan_id}/receive", summary="Mark challan received")
async def receive_challan(
    challan_id: int,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Marks the challan received today and completes its job."""
    await ProductionService(session).receive_challan(challan_id)
    return redirect("/challans")
