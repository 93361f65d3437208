from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.api.pages import redirect, render_page
from shop_erp.core.deps import get_session, require_identity
from shop_erp.repositories.master_data import CustomerRepository, EmployeeRepository, MachineRepository, PartRepository
from shop_erp.schemas.auth import Identity
from shop_erp.schemas.production import JobForm, RouteOperation
from shop_erp.services.production import ProductionService, append_operation, job_progress
from shop_erp.ui.dialog import FormDialog
from shop_erp.ui.formatting import format_date, status_badge
from shop_erp.ui.forms import FormField, form_values, option_list, parse_form, render_form
from shop_erp.ui.table import Column, DataTable
from shop_erp.ui.templating import render_fragment

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Production"])

JOB_COLUMNS = [
    Column("job_id", "Job ID"),
    Column("customer.name", "Customer"),
    Column("part_no", "Part No"),
    Column("qty_ordered", "Qty Ordered"),
    Column("qty_completed", "Qty Completed"),
    Column("due_date", "Due Date", lambda v, _: format_date(v)),
    Column("status", "Status", lambda v, _: status_badge(v)),
]
JOB_SCALAR_FIELDS = ("job_type", "customer_id", "part_no", "rev", "qty_ordered", "due_date")
_ROUTE_KEY = re.compile(r"^route-(\d+)-(op_seq|op_name|machine_id|operator_id)$")


def parse_route(posted: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Collect ``route-{n}-{field}`` inputs into ordered operation dicts, dropping blank values."""
    rows: Dict[int, Dict[str, Any]] = {}
    for key, value in posted.items():
        match = _ROUTE_KEY.match(key)
        if not match:
            continue
        row = rows.setdefault(int(match.group(1)), {})
        if isinstance(value, str) and value.strip():
            row[match.group(2)] = value.strip()
    return [rows[index] for index in sorted(rows)]


def _job_payload(posted: Mapping[str, Any]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {name: posted.get(name, "") for name in JOB_SCALAR_FIELDS}
    payload["route"] = parse_route(posted)
    return payload


def _route_errors(errors: Dict[str, str]) -> Dict[str, str]:
    route_messages = [msg for key, msg in errors.items() if key.startswith("route.")]
    if route_messages:
        errors["route"] = route_messages[0]
    return errors


async def _job_fields(session: AsyncSession) -> List[FormField]:
    customers = await CustomerRepository(session).list(order_by=("name", "id"))
    parts = await PartRepository(session).list(order_by=("part_no",))
    return [
        FormField("job_type", "Job Type", kind="select", required=True, options=[("CNC", "CNC"), ("PLATING", "Plating")]),
        FormField("customer_id", "Customer", kind="select", required=True, options=option_list(customers)),
        FormField(
            "part_no",
            "Part No",
            kind="select",
            required=True,
            options=[(p.part_no, f"{p.part_no} - {p.description or ''}") for p in parts],
        ),
        FormField("rev", "Revision"),
        FormField("qty_ordered", "Qty Ordered", kind="number", required=True),
        FormField("due_date", "Due Date", kind="date"),
    ]


async def _job_dialog(
    session: AsyncSession,
    *,
    title: str,
    action: str,
    values: Mapping[str, Any],
    route: List[Mapping[str, Any]],
    errors: Optional[Dict[str, str]] = None,
) -> Markup:
    errors = errors or {}
    machines = await MachineRepository(session).list(order_by=("name", "id"))
    operators = await EmployeeRepository(session).list_active()
    editor = render_fragment(
        "components/route_editor.html",
        route=route,
        machines=option_list(machines),
        operators=option_list(operators),
        errors=errors,
    )
    content = render_form(
        await _job_fields(session),
        action=action,
        values=values,
        errors=errors,
        submit_label="Save Job",
        cancel_url="/jobs",
        extra=editor,
    )
    return FormDialog(title, "/jobs", "lg").render(True, content)


async def _render_jobs(
    request: Request,
    identity: Identity,
    session: AsyncSession,
    *,
    dialog: Markup | str = "",
    status_code: int = 200,
) -> HTMLResponse:
    jobs = await ProductionService(session).list_jobs()
    table = DataTable(
        JOB_COLUMNS,
        on_edit=lambda job: f"/jobs/{job.job_id}/edit",
        on_delete=lambda job: f"/jobs/{job.job_id}/delete",
    )
    return render_page(
        request,
        "pages/list.html",
        identity=identity,
        heading="Job Orders",
        subtitle="CNC and plating job orders with their routing",
        actions=[{"label": "Create Job Order", "url": "/jobs/new"}],
        table=table.render(jobs),
        dialog=dialog,
        status_code=status_code,
    )


async def _submit_job(
    request: Request, identity: Identity, session: AsyncSession, *, job_id: Optional[str] = None
) -> HTMLResponse:
    posted = await request.form()
    payload = _job_payload(posted)
    title, action = ("Edit Job Order", f"/jobs/{job_id}") if job_id else ("Create Job Order", "/jobs")
    if posted.get("action") == "add_op":
        route = append_operation(RouteOperation.model_validate(op) for op in _valid_ops(payload["route"]))
        dialog = await _job_dialog(
            session, title=title, action=action, values=payload, route=[op.model_dump() for op in route]
        )
        return await _render_jobs(request, identity, session, dialog=dialog)

    data, errors = parse_form(JobForm, payload)
    if data is None:
        dialog = await _job_dialog(
            session, title=title, action=action, values=payload, route=payload["route"], errors=_route_errors(errors)
        )
        return await _render_jobs(request, identity, session, dialog=dialog, status_code=422)
    service = ProductionService(session)
    if job_id:
        await service.update_job(job_id, data)
    else:
        await service.create_job(data)
    return redirect("/jobs")


def _valid_ops(ops: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # op_seq is always posted; other values may be partially typed in
    valid = []
    for index, op in enumerate(ops):
        op = dict(op)
        op.setdefault("op_seq", (index + 1) * 10)
        for name in ("machine_id", "operator_id"):
            if name in op and not str(op[name]).isdigit():
                op.pop(name)
        valid.append(op)
    return valid


# PUBLIC_INTERFACE
@router.get("/jobs", response_class=HTMLResponse, summary="List job orders")
async def jobs_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    return await _render_jobs(request, identity, session)


# PUBLIC_INTERFACE
@router.get("/jobs/new", response_class=HTMLResponse, summary="Create job dialog")
async def new_job_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    dialog = await _job_dialog(
        session, title="Create Job Order", action="/jobs", values={"job_type": "CNC", "rev": "A"}, route=[]
    )
    return await _render_jobs(request, identity, session, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("/jobs", response_class=HTMLResponse, summary="Create job order")
async def create_job(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Create a job order in ``pending`` with a generated ``CNC-``/``PLT-`` job code.

    Posting with ``action=add_op`` re-opens the dialog with one more routing
    operation instead of saving.
    """
    return await _submit_job(request, identity, session)


# PUBLIC_INTERFACE
@router.get("/jobs/{job_id}/edit", response_class=HTMLResponse, summary="Edit job dialog")
async def edit_job_page(
    job_id: str,
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    job = await ProductionService(session).get_job(job_id)
    dialog = await _job_dialog(
        session,
        title="Edit Job Order",
        action=f"/jobs/{job_id}",
        values=form_values(job, [FormField(name, name) for name in JOB_SCALAR_FIELDS]),
        route=list(job.route or []),
    )
    return await _render_jobs(request, identity, session, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("/jobs/{job_id}", response_class=HTMLResponse, summary="Update job order")
async def update_job(
    job_id: str,
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    await ProductionService(session).get_job(job_id)
    return await _submit_job(request, identity, session, job_id=job_id)


# PUBLIC_INTERFACE
@router.get("/jobs/{job_id}/delete", response_class=HTMLResponse, summary="Confirm job deletion")
async def confirm_delete_job(
    job_id: str,
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    job = await ProductionService(session).get_job(job_id)
    content = render_fragment(
        "components/confirm.html",
        message=f"Are you sure you want to delete {job.job_id}?",
        action=f"/jobs/{job.job_id}/delete",
        cancel_url="/jobs",
    )
    dialog = FormDialog("Delete Job Order", "/jobs", "sm").render(True, content)
    return await _render_jobs(request, identity, session, dialog=dialog)


# PUBLIC_INTERFACE
@router.post("/jobs/{job_id}/delete", summary="Delete job order")
async def delete_job(
    job_id: str,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    service = ProductionService(session)
    await service.get_job(job_id)
    await service.delete_job(job_id)
    return redirect("/jobs")


# PUBLIC_INTERFACE
@router.get("/shop-floor", response_class=HTMLResponse, summary="Shop floor board")
async def shop_floor_page(
    request: Request,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    """Pending and in-progress jobs, earliest due date first, with progress."""
    jobs = await ProductionService(session).list_active_jobs()
    items = [{"job": job, "progress": job_progress(job.qty_completed, job.qty_ordered)} for job in jobs]
    return render_page(
        request,
        "pages/shop_floor.html",
        identity=identity,
        jobs=items,
        in_progress=sum(1 for job in jobs if job.status == "in-progress"),
        pending=sum(1 for job in jobs if job.status == "pending"),
    )


# PUBLIC_INTERFACE
@router.post("/shop-floor/{job_id}/start", summary="Start job")
async def start_job(
    job_id: str,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    await ProductionService(session).start_job(job_id)
    return redirect("/shop-floor")


# PUBLIC_INTERFACE
@router.post("/shop-floor/{job_id}/pause", summary="Pause job")
async def pause_job(
    job_id: str,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    await ProductionService(session).pause_job(job_id)
    return redirect("/shop-floor")


# PUBLIC_INTERFACE
@router.post("/shop-floor/{job_id}/complete", summary="Record completed quantity")
async def complete_job_quantity(
    job_id: str,
    qty_completed: int = Form(..., ge=0),
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_session),
):
    await ProductionService(session).complete_quantity(job_id, qty_completed)
    return redirect("/shop-floor")
